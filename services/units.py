"""
Unit Conversion Service

Immutable unit table and the conversion engine built on top of it.
"""

from dataclasses import dataclass
from types import MappingProxyType

from constants import UNIT_SYNONYMS, BASE_UNIT_FACTORS


def normalize_unit(unit):
    """Lowercase a unit token and drop surrounding spaces and a trailing period."""
    if unit is None:
        return None
    normalized = ' '.join(str(unit).lower().split()).rstrip('.')
    return normalized or None


@dataclass(frozen=True)
class UnitTable:
    """
    Read-only registry of unit synonyms and directed conversion edges.

    An edge ``edges[a][b] == f`` means ``1 a == f b``. Only one direction
    needs to be stored; lookups fall back to the inverse edge.
    """
    synonyms: MappingProxyType
    edges: MappingProxyType

    @classmethod
    def from_base_factors(cls, base_factors, synonyms=None):
        """
        Build a table from ``{unit: (base_unit, factor)}``.

        Every pair of units sharing a base gets a single directed edge,
        from the unit declared first to the unit declared later.
        """
        units = list(base_factors)
        edges = {}
        for i, source in enumerate(units):
            source_base, source_factor = base_factors[source]
            targets = {}
            for target in units[i + 1:]:
                target_base, target_factor = base_factors[target]
                if target_base == source_base:
                    targets[target] = source_factor / target_factor
            if targets:
                edges[source] = MappingProxyType(targets)

        names = {unit: unit for unit in units}
        names.update(synonyms or {})
        return cls(synonyms=MappingProxyType(names), edges=MappingProxyType(edges))

    def canonical(self, unit):
        """Return the canonical identifier for a unit token (unknown tokens pass through)."""
        normalized = normalize_unit(unit)
        if normalized is None:
            return None
        return self.synonyms.get(normalized, normalized)

    def is_known(self, unit):
        normalized = normalize_unit(unit)
        return normalized is not None and normalized in self.synonyms

    def factor(self, from_unit, to_unit):
        """Return the factor converting ``from_unit`` into ``to_unit``, or None without a path."""
        source = self.canonical(from_unit)
        target = self.canonical(to_unit)
        if source is None or target is None:
            return None
        if source == target:
            return 1.0
        direct = self.edges.get(source, {}).get(target)
        if direct is not None:
            return direct
        inverse = self.edges.get(target, {}).get(source)
        if inverse:
            return 1 / inverse
        return None

    def is_comparable(self, unit_a, unit_b):
        """
        Whether two quantities can be compared.

        A quantity without a unit is dimensionless and compares at face
        value against anything.
        """
        if normalize_unit(unit_a) is None or normalize_unit(unit_b) is None:
            return True
        return self.factor(unit_a, unit_b) is not None

    def convert(self, amount, from_unit=None, to_unit=None):
        """
        Convert ``amount`` from one unit to another.

        Returns the amount unchanged when either unit is missing, when the
        units are the same, or when no conversion path exists. Callers that
        need to know whether the result is meaningful must check
        ``is_comparable`` first.
        """
        if normalize_unit(from_unit) is None or normalize_unit(to_unit) is None:
            return amount
        if normalize_unit(from_unit) == normalize_unit(to_unit):
            return amount

        source = self.canonical(from_unit)
        target = self.canonical(to_unit)
        if source == target:
            return amount

        direct = self.edges.get(source, {}).get(target)
        if direct is not None:
            return amount * direct

        inverse = self.edges.get(target, {}).get(source)
        if inverse:
            return amount / inverse

        return amount  # No path, return original


# Process-wide default table, built once at import
DEFAULT_UNIT_TABLE = UnitTable.from_base_factors(BASE_UNIT_FACTORS, UNIT_SYNONYMS)


def convert_unit(amount, from_unit=None, to_unit=None, units=None):
    """Convert ``amount`` between units using ``units`` (default table when omitted)."""
    return (units or DEFAULT_UNIT_TABLE).convert(amount, from_unit, to_unit)
