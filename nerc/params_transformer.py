"""
Params Transformer: Lark tree transformer for training-parameters files.

Converts the parse tree of a parameters file into a TrainingParams object.
"""

from typing import Optional

from lark import Transformer, v_args

from nerc.params_ast import TrainingParams


@v_args(inline=True)
class ParamsTransformer(Transformer):
    """Transformer that turns parsed entries into a TrainingParams."""

    def __init__(self, params_file_path: Optional[str] = None):
        super().__init__()
        self.params_file_path = params_file_path

    def start(self, *entries):
        """Collect entries; a repeated key keeps its last value."""
        settings = {}
        for key, value in entries:
            settings[key] = value
        return TrainingParams(settings=settings, path=self.params_file_path)

    def entry(self, key, value=None):
        return str(key), str(value).strip() if value is not None else ""
