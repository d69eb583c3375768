"""Layer classifier: walks the ordered rule tables for one entity or file name."""

from __future__ import annotations

from pathlib import PurePath
from typing import Iterable, Optional

from ..config import NamingConventions
from .models import EntityShape, Layer
from .rules import FILE_NAME_RULES, LAYER_RULES, ClassificationRule, NamePatterns


class LayerClassifier:
    """Assigns a Layer to an EntityShape using an ordered rule table.

    Classification depends only on the shape (including name and declaring
    file name), so equal shapes always classify the same way.

    Usage:
        classifier = LayerClassifier()
        layer = classifier.classify(shape)
        rule = classifier.explain(shape)  # which rule fired
    """

    def __init__(
        self,
        naming: Optional[NamingConventions] = None,
        rules: Iterable[ClassificationRule] = LAYER_RULES,
    ) -> None:
        self._names = NamePatterns.from_conventions(naming)
        self._rules = tuple(rules)
        if not self._rules:
            raise ValueError("LayerClassifier needs at least one rule")

    @property
    def rules(self) -> tuple[ClassificationRule, ...]:
        return self._rules

    @property
    def names(self) -> NamePatterns:
        return self._names

    def explain(self, shape: EntityShape) -> ClassificationRule:
        """Return the first rule matching ``shape``.

        The last rule acts as the default; if a custom table has no
        catch-all and nothing matches, the last rule is still returned.
        """
        for rule in self._rules:
            if rule.matches(shape, self._names):
                return rule
        return self._rules[-1]

    def classify(self, shape: EntityShape) -> Layer:
        return self.explain(shape).layer


def classify_file_name(file_name: str) -> Optional[Layer]:
    """File-granularity hint for files that yield no entity-level signal.

    Returns:
        A Layer, or None when no file-name hint applies (unknown layer)
    """
    base = PurePath(file_name).name
    for _name, predicate, layer in FILE_NAME_RULES:
        if predicate(base):
            return layer
    return None
