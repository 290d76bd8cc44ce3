from pathlib import Path
from typing import Optional

from lark import Lark
from lark.exceptions import LarkError, VisitError

from nerc.params_ast import TrainingParams
from nerc.params_transformer import ParamsTransformer
from nerc.resolver.core import ConfigurationError

GRAMMAR_PATH = Path(__file__).parent / "params_grammar.lark"
with open(GRAMMAR_PATH, "r", encoding="utf-8") as f:
    PARAMS_GRAMMAR = f.read()

params_parser = Lark(PARAMS_GRAMMAR, start="start", parser="lalr", propagate_positions=True)

COMMENT_PREFIXES = ("#", "!")


def _logical_lines(text: str):
    """Strip lines, drop blank and comment lines and join continuations."""
    lines = text.splitlines()
    resolved = []
    i = 0
    while i < len(lines):
        line = lines[i].strip()
        # A trailing backslash continues the value on the next line
        while line.endswith("\\") and i + 1 < len(lines):
            i += 1
            line = line[:-1] + lines[i].strip()
        i += 1
        if not line or line.startswith(COMMENT_PREFIXES):
            continue
        resolved.append(line)
    return resolved


def parse_string(code: str, *, params_file_path: Optional[str] = None) -> TrainingParams:
    """
    Parse the text of a training-parameters file.

    Raises:
        ConfigurationError: If a line is not a "Key=Value" setting.
    """
    filtered_code = "\n".join(_logical_lines(code))
    try:
        tree = params_parser.parse(filtered_code)
        return ParamsTransformer(params_file_path=params_file_path).transform(tree)
    except VisitError as ve:
        raise ConfigurationError(f"Invalid parameters: {ve.orig_exc}") from ve.orig_exc
    except LarkError as e:
        where = f" in {params_file_path}" if params_file_path else ""
        raise ConfigurationError(f"Invalid parameters{where}: {e}") from e


def parse_file(path) -> TrainingParams:
    with open(path, "r", encoding="utf-8") as file:
        return parse_string(file.read(), params_file_path=str(path))
