"""Recognition vocabulary and its optional per-project configuration."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 200

# TornadoFX builder functions.
DEFAULT_WIDGETS = frozenset(
    {
        "anchorpane",
        "borderpane",
        "button",
        "buttonbar",
        "checkbox",
        "choicebox",
        "colorpicker",
        "combobox",
        "datepicker",
        "drawer",
        "field",
        "fieldset",
        "flowpane",
        "form",
        "gridpane",
        "hbox",
        "hyperlink",
        "imageview",
        "label",
        "listview",
        "menu",
        "menubar",
        "menuitem",
        "pane",
        "passwordfield",
        "progressbar",
        "progressindicator",
        "radiobutton",
        "row",
        "scrollpane",
        "separator",
        "slider",
        "spinner",
        "splitpane",
        "squeezebox",
        "stackpane",
        "tab",
        "tableview",
        "tabpane",
        "text",
        "textarea",
        "textfield",
        "textflow",
        "tilepane",
        "titledpane",
        "togglebutton",
        "toolbar",
        "treeview",
        "treetableview",
        "vbox",
    }
)

DEFAULT_REACTIVE_WRAPPERS = frozenset(
    {
        "asObservable",
        "observable",
        "observableArrayList",
        "observableList",
        "observableListOf",
        "observableMapOf",
        "observableSetOf",
        "SimpleBooleanProperty",
        "SimpleDoubleProperty",
        "SimpleFloatProperty",
        "SimpleIntegerProperty",
        "SimpleListProperty",
        "SimpleLongProperty",
        "SimpleMapProperty",
        "SimpleObjectProperty",
        "SimpleSetProperty",
        "SimpleStringProperty",
        "stringProperty",
        "booleanProperty",
        "doubleProperty",
        "intProperty",
        "objectProperty",
    }
)

DEFAULT_COLLECTION_BUILDERS = frozenset(
    {
        "ArrayList",
        "HashMap",
        "HashSet",
        "LinkedHashMap",
        "LinkedHashSet",
        "LinkedList",
        "arrayListOf",
        "arrayOf",
        "emptyArray",
        "emptyList",
        "emptyMap",
        "emptySet",
        "hashMapOf",
        "hashSetOf",
        "linkedMapOf",
        "listOf",
        "mapOf",
        "mutableListOf",
        "mutableMapOf",
        "mutableSetOf",
        "setOf",
        "sortedMapOf",
        "sortedSetOf",
    }
)

DEFAULT_INJECTION_DELEGATES = frozenset({"di", "inject", "nullableParam", "param"})


@dataclass(frozen=True)
class Vocabulary:
    """Immutable name tables shared read-only by all sessions."""

    widgets: frozenset[str] = DEFAULT_WIDGETS
    reactive_wrappers: frozenset[str] = DEFAULT_REACTIVE_WRAPPERS
    collection_builders: frozenset[str] = DEFAULT_COLLECTION_BUILDERS
    injection_delegates: frozenset[str] = DEFAULT_INJECTION_DELEGATES
    max_depth: int = DEFAULT_MAX_DEPTH

    def is_widget(self, name: str) -> bool:
        return name in self.widgets


DEFAULT_VOCABULARY = Vocabulary()

_LIST_KEYS = ("widgets", "reactive_wrappers", "collection_builders", "injection_delegates")


def vocabulary_from_mapping(table: dict) -> Vocabulary:
    """Build a :class:`Vocabulary` from a config table, starting from the defaults."""
    overrides: dict = {}
    for key in _LIST_KEYS:
        values = table.get(key)
        if values is not None:
            overrides[key] = frozenset(str(v) for v in values)

    extra = table.get("extra_widgets")
    if extra:
        base = overrides.get("widgets", DEFAULT_WIDGETS)
        overrides["widgets"] = base | frozenset(str(v) for v in extra)

    max_depth = table.get("max_depth")
    if max_depth is not None:
        if not isinstance(max_depth, int) or max_depth < 1:
            raise ValueError(f"max_depth must be a positive integer, got {max_depth!r}")
        overrides["max_depth"] = max_depth

    return replace(DEFAULT_VOCABULARY, **overrides)


def load_vocabulary(project_dir: Path) -> Vocabulary:
    """Read vocabulary overrides from .kbreakdown.toml or pyproject.toml."""
    kbreakdown_toml = project_dir / ".kbreakdown.toml"
    if kbreakdown_toml.exists():
        try:
            with open(kbreakdown_toml, "rb") as f:
                data = tomllib.load(f)
            return vocabulary_from_mapping(data.get("kbreakdown", {}))
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning("Could not read %s: %s", kbreakdown_toml, e)

    pyproject = project_dir / "pyproject.toml"
    if pyproject.exists():
        try:
            with open(pyproject, "rb") as f:
                data = tomllib.load(f)
            table = data.get("tool", {}).get("kbreakdown")
            if table is not None:
                return vocabulary_from_mapping(table)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning("Could not read %s: %s", pyproject, e)

    return DEFAULT_VOCABULARY
