import json
import os

import pytest

from javadoc_autofill import cli


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("JAVADOC_AUTOFILL_"):
            monkeypatch.delenv(key)


def write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def test_cli_rewrites_tree(tmp_path):
    write(tmp_path / "A.java", "class A {\n}\n")
    assert cli.main([str(tmp_path)]) == cli.EXIT_OK
    assert (tmp_path / "A.java").read_text(encoding="utf-8").startswith("/**\n * A class description")


def test_cli_flags_and_exclude(tmp_path):
    write(tmp_path / "A.java", "class A {\n}\n")
    write(tmp_path / "gen" / "B.java", "class B {\n    int f() { return 1; }\n}\n")
    rc = cli.main([str(tmp_path), "--no-add-class-javadoc", "--exclude", ".*/gen/.*"])
    assert rc == cli.EXIT_OK
    assert (tmp_path / "A.java").read_text(encoding="utf-8") == "class A {\n}\n"
    assert "/**" not in (tmp_path / "gen" / "B.java").read_text(encoding="utf-8")


def test_cli_config_file(tmp_path):
    write(tmp_path / "src" / "A.java", "class A {\n}\n")
    config = tmp_path / "autofill.json"
    config.write_text(json.dumps({"sourceDir": str(tmp_path / "src"), "addClassJavadoc": False}), encoding="utf-8")
    assert cli.main(["--config", str(config)]) == cli.EXIT_OK
    assert (tmp_path / "src" / "A.java").read_text(encoding="utf-8") == "class A {\n}\n"


def test_cli_missing_directory(tmp_path):
    assert cli.main([str(tmp_path / "missing")]) == cli.EXIT_USAGE


def test_cli_bad_config(tmp_path):
    config = tmp_path / "autofill.json"
    config.write_text(json.dumps({"excludePatterns": ["("]}), encoding="utf-8")
    assert cli.main([str(tmp_path), "--config", str(config)]) == cli.EXIT_USAGE


def test_cli_parse_errors_are_skipped_not_failed(tmp_path):
    write(tmp_path / "Bad.java", "class {")
    assert cli.main([str(tmp_path), "-v"]) == cli.EXIT_OK


def test_build_parser_toggles_default_to_none():
    args = cli.build_parser().parse_args([])
    assert args.add_class_javadoc is None
    assert args.include_private_methods is None
    args = cli.build_parser().parse_args(["--include-private-methods", "--no-add-throws-javadoc"])
    assert args.include_private_methods is True
    assert args.add_throws_javadoc is False
