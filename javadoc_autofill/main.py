from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, HTTPException  # type: ignore
from pydantic import BaseModel  # type: ignore

from .adapters.java_adapter import JavaAdapter
from .config import AutofillConfig
from .errors import JavaParseError
from .processor import autofill_source

app = FastAPI(title="Javadoc Autofill", version="0.1.0")
adapter = JavaAdapter()


class AutofillRequest(BaseModel):
    code: str
    filename: str | None = None
    # same option names as the config file; omitted -> defaults
    options: Optional[AutofillConfig] = None


class AutofillResponse(BaseModel):
    modified: bool
    code: str


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/autofill", response_model=AutofillResponse)
def autofill(req: AutofillRequest) -> AutofillResponse:
    if req.filename and not req.filename.endswith(".java"):
        raise HTTPException(status_code=400, detail=f"Not a Java source file: {req.filename}")

    config = req.options or AutofillConfig()
    try:
        modified, code = autofill_source(req.code, config, req.filename, adapter)
    except JavaParseError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return AutofillResponse(modified=modified, code=code)
