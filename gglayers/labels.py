from dataclasses import field, replace
from typing import Optional

from .aes import ALIASES
from .utils import frozen_dataclass


@frozen_dataclass
class Labels:
    title: Optional[str] = None
    x: Optional[str] = None
    y: Optional[str] = None
    # legend titles keyed by channel
    legend: dict[str, str] = field(default_factory=dict)

    def merge(self, other: "Labels") -> "Labels":
        return replace(
            self,
            title=other.title if other.title is not None else self.title,
            x=other.x if other.x is not None else self.x,
            y=other.y if other.y is not None else self.y,
            legend={**self.legend, **other.legend},
        )


def labs(x=None, y=None, title=None, **channel_titles):
    return Labels(
        title=title,
        x=x,
        y=y,
        legend={ALIASES.get(k, k): v for k, v in channel_titles.items() if v is not None},
    )


def ggtitle(label):
    return Labels(title=label)


def xlab(label):
    return Labels(x=label)


def ylab(label):
    return Labels(y=label)
