import copy
import logging
from typing import Iterable

from .config import AutofillConfig
from .doc.reconcile import reconcile
from .errors import DeclarationProcessingError
from .model import Declaration, JavaUnit

logger = logging.getLogger(__name__)

_KIND_LABELS = {
    "TypeDecl": "type",
    "EnumConstant": "enum constant",
    "Method": "method",
    "AnnotationMember": "annotation member",
}


def _run_phase(decls: Iterable[Declaration], config: AutofillConfig, where: str) -> bool:
    modified = False
    for decl in decls:
        kind = _KIND_LABELS.get(type(decl).__name__, "declaration")
        snapshot = copy.deepcopy(decl.comment)
        try:
            changed = reconcile(decl, config)
        except Exception as e:
            # leave this declaration as it was, keep going with the rest
            decl.comment = snapshot
            logger.warning("%s (%s)", DeclarationProcessingError(kind, decl.name, e), where)
            continue
        if changed:
            logger.debug("Updated Javadoc of %s %s (%s)", kind, decl.name, where)
        modified |= changed
    return modified


def synthesize(unit: JavaUnit, config: AutofillConfig) -> bool:
    """
    Reconcile every declaration of the unit in phase order:
    types and enum constants, then methods, then annotation members.
    Returns True when at least one comment changed.
    """
    where = unit.source_file or "<source>"
    modified = False

    if config.add_class_javadoc:
        modified |= _run_phase(unit.types(), config, where)

    if config.handles_methods:
        modified |= _run_phase(unit.methods(), config, where)

    if config.add_return_javadoc:
        modified |= _run_phase(unit.annotation_members(), config, where)

    return modified
