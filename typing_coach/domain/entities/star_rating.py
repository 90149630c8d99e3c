"""Star rating configuration entities."""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class StarBand(BaseModel):
    """Minimum accuracy and speed needed to earn a number of stars.

    ``min_speed_ratio`` is relative to the lesson target WPM, so a ratio of
    0.8 with a target of 25 WPM requires 20 WPM.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    stars: int = Field(ge=1, le=5)
    min_accuracy: int = Field(ge=0, le=100)
    min_speed_ratio: float = Field(ge=0.0)


DEFAULT_STAR_BANDS: tuple[StarBand, ...] = (
    StarBand(stars=5, min_accuracy=98, min_speed_ratio=1.0),
    StarBand(stars=4, min_accuracy=95, min_speed_ratio=0.8),
    StarBand(stars=3, min_accuracy=90, min_speed_ratio=0.6),
    StarBand(stars=2, min_accuracy=80, min_speed_ratio=0.4),
    StarBand(stars=1, min_accuracy=70, min_speed_ratio=0.2),
)


class StarRatingPolicy(BaseModel):
    """Lesson-specific star rating thresholds."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    target_wpm: int = Field(default=30, ge=1)
    bands: tuple[StarBand, ...] = DEFAULT_STAR_BANDS

    @model_validator(mode="after")
    def _check_bands_are_nested(self) -> "StarRatingPolicy":
        # A higher band must never be easier than a lower one, otherwise the
        # rating would stop being monotonic in wpm and accuracy.
        ordered = sorted(self.bands, key=lambda band: band.stars, reverse=True)
        stars = [band.stars for band in ordered]
        if len(set(stars)) != len(stars):
            raise ValueError("Star bands must have distinct star counts")
        for higher, lower in zip(ordered, ordered[1:]):
            if higher.min_accuracy < lower.min_accuracy or higher.min_speed_ratio < lower.min_speed_ratio:
                raise ValueError(
                    f"Band for {higher.stars} stars is easier than band for {lower.stars} stars"
                )
        object.__setattr__(self, "bands", tuple(ordered))
        return self

    def with_target(self, target_wpm: int) -> "StarRatingPolicy":
        """Return a copy of this policy for another target speed."""
        return StarRatingPolicy(target_wpm=max(1, target_wpm), bands=self.bands)
