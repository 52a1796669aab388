from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from exceptions import TagDecodeError

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DAY_KEY_FORMAT = "%Y-%m-%d"
DAY_KEY_LENGTH = 10
UNASSIGNED_ID = 0

E = TypeVar("E", bound=Enum)


class MoodType(str, Enum):
    HAPPY = "HAPPY"
    RELAXED = "RELAXED"
    NEUTRAL = "NEUTRAL"
    SAD = "SAD"
    ANGRY = "ANGRY"

    @property
    def score(self) -> int:
        return _MOOD_SCORES[self]

    @property
    def label(self) -> str:
        return _MOOD_LABELS[self]


_MOOD_SCORES = {
    MoodType.HAPPY: 2,
    MoodType.RELAXED: 1,
    MoodType.NEUTRAL: 0,
    MoodType.SAD: -1,
    MoodType.ANGRY: -2,
}

_MOOD_LABELS = {
    MoodType.HAPPY: "Happy 😊",
    MoodType.RELAXED: "Relaxed 😌",
    MoodType.NEUTRAL: "Neutral 😐",
    MoodType.SAD: "Sad 😢",
    MoodType.ANGRY: "Angry 😠",
}


class SleepQuality(str, Enum):
    GOOD = "GOOD"
    MEDIUM = "MEDIUM"
    POOR = "POOR"


class SocialActivity(str, Enum):
    FAMILY = "FAMILY"
    FRIENDS = "FRIENDS"
    DATE = "DATE"
    PARTY = "PARTY"


class Hobby(str, Enum):
    MOVIES = "MOVIES"
    READING = "READING"
    GAMES = "GAMES"
    SPORT = "SPORT"
    RELAXATION = "RELAXATION"


class FoodType(str, Enum):
    HEALTHY = "HEALTHY"
    FAST_FOOD = "FAST_FOOD"
    HOMEMADE = "HOMEMADE"
    RESTAURANT = "RESTAURANT"
    NO_SUGAR = "NO_SUGAR"


def decode_tag(enum_cls: Type[E], tag: Any) -> Optional[E]:
    """Decode a stored tag or UI label ("Fast Food", "good") into enum_cls.

    Blank input means the attribute was not chosen and decodes to None.
    Anything else must name a member, otherwise TagDecodeError is raised.
    """
    if tag is None or isinstance(tag, enum_cls):
        return tag
    text = str(tag).strip()
    if not text:
        return None
    key = text.replace(" ", "_").upper()
    if key in enum_cls.__members__:
        return enum_cls[key]
    if enum_cls is MoodType:
        for member in MoodType:
            if member.label.lower() == text.lower():
                return member
    raise TagDecodeError(enum_cls.__name__, text)


def now_timestamp() -> str:
    return datetime.now().strftime(TIMESTAMP_FORMAT)


class Location(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    zoom: float = Field(15.0, ge=0)


class MoodFields(BaseModel):
    """Fields shared by stored entries and request bodies."""

    model_config = ConfigDict(populate_by_name=True)

    mood_type: MoodType = Field(
        ...,
        validation_alias=AliasChoices("moodType", "type"),
        serialization_alias="moodType",
    )
    note: str = ""
    sleep: Optional[SleepQuality] = None
    social: Optional[SocialActivity] = None
    hobby: Optional[Hobby] = None
    food: Optional[FoodType] = None
    photo_uri: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("photoUri", "photo_uri"),
        serialization_alias="photoUri",
    )
    location: Optional[Location] = None

    @field_validator("mood_type", mode="before")
    @classmethod
    def decode_mood_type(cls, v):
        return decode_tag(MoodType, v)

    @field_validator("sleep", mode="before")
    @classmethod
    def decode_sleep(cls, v):
        return decode_tag(SleepQuality, v)

    @field_validator("social", mode="before")
    @classmethod
    def decode_social(cls, v):
        return decode_tag(SocialActivity, v)

    @field_validator("hobby", mode="before")
    @classmethod
    def decode_hobby(cls, v):
        return decode_tag(Hobby, v)

    @field_validator("food", mode="before")
    @classmethod
    def decode_food(cls, v):
        return decode_tag(FoodType, v)

    @field_validator("note", mode="before")
    @classmethod
    def empty_note(cls, v):
        return "" if v is None else v


class MoodEntry(MoodFields):
    id: int = Field(UNASSIGNED_ID, ge=0)
    timestamp: str

    @property
    def day_key(self) -> str:
        return self.timestamp[:DAY_KEY_LENGTH]

    @property
    def score(self) -> int:
        return self.mood_type.score

    def to_record(self) -> Dict[str, Any]:
        """Dict written to the journal file; unset optionals are left out."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class MoodEntryCreate(MoodFields):
    timestamp: Optional[str] = Field(None, description="YYYY-MM-DD HH:MM:SS, defaults to now")

    @field_validator("timestamp")
    @classmethod
    def validate_timestamp(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        try:
            datetime.strptime(v, TIMESTAMP_FORMAT)
        except ValueError:
            raise ValueError("timestamp must be YYYY-MM-DD HH:MM:SS")
        return v

    def to_entry(self) -> MoodEntry:
        data = self.model_dump(exclude={"timestamp"})
        return MoodEntry(**data, timestamp=self.timestamp or now_timestamp())


class MoodEntryUpdate(MoodFields):
    def to_entry(self, existing: MoodEntry) -> MoodEntry:
        return MoodEntry(**self.model_dump(), id=existing.id, timestamp=existing.timestamp)


class DailySummary(BaseModel):
    date: str
    entries: List[MoodEntry]
    average_score: float = Field(serialization_alias="averageScore")


class DayInsight(BaseModel):
    date: str
    average_score: float = Field(serialization_alias="averageScore")
    average_label: str = Field(serialization_alias="averageLabel")
    counts: Dict[MoodType, int]
    total: int
