"""
Configuration models.
"""

from dataclasses import dataclass, field
from typing import Dict, Any
from hashlib import sha256
import json
from datetime import datetime, timezone


@dataclass
class ConfigHash:
    """Configuration hash for reproducibility."""
    hash_value: str
    timestamp: str

    @staticmethod
    def compute(config_dict: Dict[str, Any]) -> str:
        """Compute SHA256 hash of config."""
        json_str = json.dumps(config_dict, sort_keys=True, default=str)
        return sha256(json_str.encode()).hexdigest()

    @classmethod
    def create(cls, config_dict: Dict[str, Any]) -> 'ConfigHash':
        """Hash a config and stamp it with the current UTC time."""
        return cls(
            hash_value=cls.compute(config_dict),
            timestamp=datetime.now(timezone.utc).isoformat(),
        )


LINE_STYLES = ('solid', 'dashed')


@dataclass(frozen=True)
class LineStyle:
    """Display settings for one band line."""
    show: bool = True
    color: str = '#06b6d4'
    line_width: int = 1
    line_style: str = 'solid'

    def __post_init__(self):
        if self.line_style not in LINE_STYLES:
            raise ValueError(f"line_style must be one of {LINE_STYLES}")
        if self.line_width < 1:
            raise ValueError("line_width must be >= 1")

    @classmethod
    def from_dict(cls, data: Dict[str, Any], default: 'LineStyle') -> 'LineStyle':
        return cls(
            show=data.get('show', default.show),
            color=data.get('color', default.color),
            line_width=data.get('line_width', default.line_width),
            line_style=data.get('line_style', default.line_style),
        )


@dataclass(frozen=True)
class FillStyle:
    """Background fill between the upper and lower band."""
    show: bool = True
    opacity: float = 0.1

    def __post_init__(self):
        if not 0.0 <= self.opacity <= 1.0:
            raise ValueError("opacity must be within [0, 1]")


def _default_basis() -> LineStyle:
    return LineStyle(color='#3b82f6', line_width=2)


@dataclass(frozen=True)
class BandStyle:
    """
    Rendering configuration for the overlay.

    Consumed by the chart renderer only; the indicator engine never reads it.
    """
    basis: LineStyle = field(default_factory=_default_basis)
    upper: LineStyle = field(default_factory=LineStyle)
    lower: LineStyle = field(default_factory=LineStyle)
    fill: FillStyle = field(default_factory=FillStyle)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BandStyle':
        default = cls()
        fill = data.get('fill', {})
        return cls(
            basis=LineStyle.from_dict(data.get('basis', {}), default.basis),
            upper=LineStyle.from_dict(data.get('upper', {}), default.upper),
            lower=LineStyle.from_dict(data.get('lower', {}), default.lower),
            fill=FillStyle(
                show=fill.get('show', default.fill.show),
                opacity=float(fill.get('opacity', default.fill.opacity)),
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        lines = {}
        for name in ('basis', 'upper', 'lower'):
            line = getattr(self, name)
            lines[name] = {
                'show': line.show,
                'color': line.color,
                'line_width': line.line_width,
                'line_style': line.line_style,
            }
        lines['fill'] = {'show': self.fill.show, 'opacity': self.fill.opacity}
        return lines
