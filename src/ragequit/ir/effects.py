"""Effect templates -- timed damage (DoT) and healing (HoT) definitions."""

from __future__ import annotations

from pydantic import BaseModel, Field


class EffectTemplate(BaseModel):
    """Template for a damage-over-time or heal-over-time effect.

    The template identifies the *kind* of effect (``id``), not an
    instance.  Applying the same template twice refreshes the running
    instance instead of creating a second one.
    """

    id: str
    """Effect identifier shared by every instance (e.g. ``"burn"``)."""

    icon: str = ""

    duration: float = Field(gt=0)
    """Seconds the effect lasts after (re)application."""

    magnitude: float = Field(ge=0)
    """Damage or healing dealt per second while active."""

    @property
    def total(self) -> float:
        """Total damage or healing over the full duration."""
        return self.duration * self.magnitude
