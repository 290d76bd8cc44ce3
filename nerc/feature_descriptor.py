"""
Feature descriptor builder.

Compiles a FeatureConfig into the pipeline description consumed by the
sequence tagger, and serializes that description to its XML format:

    <generators>
      <cache>
        <generators>
          <window prevLength="2" nextLength="2">
            <custom class="...TokenFeatureGenerator" />
          </window>
          <custom class="...OutcomePriorFeatureGenerator" />
        </generators>
      </cache>
    </generators>
"""

import logging
import xml.etree.ElementTree as ET
from typing import List

from nerc.feature_ast import Cache, Custom, FeatureConfig, FeatureKind, Generators, Node, Window
from nerc.params_ast import TrainingParams

logger = logging.getLogger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

# Toggle name -> generator kind, in descriptor order. Windowed kinds are
# wrapped in the shared context window.
FEATURE_ORDER = (
    ("token", FeatureKind.TOKEN),
    ("token_class", FeatureKind.TOKEN_CLASS),
    ("outcome_prior", FeatureKind.OUTCOME_PRIOR),
    ("previous_map", FeatureKind.PREVIOUS_MAP),
    ("sentence", FeatureKind.SENTENCE),
    ("prefix", FeatureKind.PREFIX),
    ("suffix", FeatureKind.SUFFIX),
    ("bigram_class", FeatureKind.BIGRAM_CLASS),
    ("trigram_class", FeatureKind.TRIGRAM_CLASS),
    ("fourgram_class", FeatureKind.FOURGRAM_CLASS),
    ("fivegram_class", FeatureKind.FIVEGRAM_CLASS),
    ("char_ngram", FeatureKind.CHAR_NGRAM),
)
WINDOWED_KINDS = {FeatureKind.TOKEN, FeatureKind.TOKEN_CLASS}


def _feature_node(kind: FeatureKind, config: FeatureConfig) -> Node:
    if kind in WINDOWED_KINDS:
        return Window(
            child=Custom(kind),
            prev_length=config.window.lo,
            next_length=config.window.hi,
        )
    if kind is FeatureKind.SENTENCE:
        return Custom(kind, (("begin", "true"), ("end", "false")))
    if kind is FeatureKind.CHAR_NGRAM:
        return Custom(
            kind,
            (
                ("minLength", str(config.char_ngram_range.lo)),
                ("maxLength", str(config.char_ngram_range.hi)),
            ),
        )
    return Custom(kind)


def build_feature_descriptor(config: FeatureConfig) -> Generators:
    """
    Build the pipeline description for the enabled features.

    The result is always an aggregate root wrapping one cache node wrapping
    the ordered generator list, even when no feature is enabled.
    """
    nodes: List[Node] = []
    for name, kind in FEATURE_ORDER:
        if not getattr(config, name):
            continue
        nodes.append(_feature_node(kind, config))
        if kind in WINDOWED_KINDS:
            logger.info("%s features added: window range %s", kind.value, config.window)
        else:
            logger.info("%s features added", kind.value)
    return Generators(children=(Cache(child=Generators(children=tuple(nodes))),))


def _to_element(node: Node) -> ET.Element:
    if isinstance(node, Generators):
        element = ET.Element("generators")
        for child in node.children:
            element.append(_to_element(child))
        return element
    if isinstance(node, Cache):
        element = ET.Element("cache")
        element.append(_to_element(node.child))
        return element
    if isinstance(node, Window):
        element = ET.Element("window")
        element.set("prevLength", str(node.prev_length))
        element.set("nextLength", str(node.next_length))
        element.append(_to_element(node.child))
        return element
    if isinstance(node, Custom):
        element = ET.Element("custom")
        element.set("class", node.kind.class_name)
        for key, value in node.attributes:
            element.set(key, value)
        return element
    raise TypeError(f"Unknown pipeline node: {node!r}")


def serialize_descriptor(root: Node) -> str:
    """Serialize a pipeline description to pretty-printed XML."""
    element = _to_element(root)
    ET.indent(element, space="  ")
    body = ET.tostring(element, encoding="unicode")
    return f"{XML_DECLARATION}\n{body}\n"


def create_feature_descriptor(params: TrainingParams) -> str:
    """Build and serialize the descriptor for a training-parameters file."""
    config = FeatureConfig.from_params(params)
    return serialize_descriptor(build_feature_descriptor(config))
