from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
)
from typing import Annotated, Dict, List, Literal, Optional, Union
from datetime import datetime, timezone

from scriptorium.utils.ids import new_record_id, utc_now


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# SQLite drops tzinfo, so every timestamp is normalized to naive UTC up front
Timestamp = Annotated[datetime, AfterValidator(_as_naive_utc)]

# Open trait/property maps only hold scalars; Strict* keeps "1" from becoming 1
ScalarValue = Union[StrictBool, StrictInt, StrictFloat, StrictStr]
ScalarMap = Dict[str, ScalarValue]


# ============ Base Records ============


class RecordBase(BaseModel):
    """Common base: every record is identified by an opaque string id"""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=new_record_id)


class BookScopedRecord(RecordBase):
    """Record owned by a book (and transitively its project and workspace)"""

    workspace_id: str
    project_id: str
    book_id: str


class ProjectScopedRecord(RecordBase):
    project_id: str


# ============ Hierarchy Records ============


class WritingGoals(BaseModel):
    daily_words: Optional[int] = None
    weekly_words: Optional[int] = None


class WorkspaceSettings(BaseModel):
    default_word_target: Optional[int] = None
    auto_backup: Optional[bool] = None
    writing_goals: Optional[WritingGoals] = None


class WorkspaceRecord(RecordBase):
    name: str
    description: Optional[str] = None
    settings: Optional[WorkspaceSettings] = None
    created_at: Timestamp = Field(default_factory=utc_now)
    updated_at: Timestamp = Field(default_factory=utc_now)


class ProjectSettings(BaseModel):
    share_characters: Optional[bool] = None
    share_world_building: Optional[bool] = None
    series_order: List[str] = Field(default_factory=list)


class ProjectRecord(RecordBase):
    workspace_id: str
    name: str
    description: Optional[str] = None
    type: Literal["standalone", "series", "collection"] = "standalone"
    settings: Optional[ProjectSettings] = None
    created_at: Timestamp = Field(default_factory=utc_now)
    updated_at: Timestamp = Field(default_factory=utc_now)


class BookSettings(BaseModel):
    use_series_characters: Optional[bool] = None
    use_series_world: Optional[bool] = None


class BookRecord(RecordBase):
    project_id: str
    workspace_id: str
    title: str
    subtitle: Optional[str] = None
    description: Optional[str] = None
    genre: Optional[str] = None
    status: Literal["planning", "writing", "editing", "complete", "published"] = "planning"
    target_word_count: Optional[int] = Field(default=None, ge=0)
    current_word_count: Optional[int] = Field(default=None, ge=0)
    series_order: Optional[int] = None
    settings: Optional[BookSettings] = None
    created_at: Timestamp = Field(default_factory=utc_now)
    updated_at: Timestamp = Field(default_factory=utc_now)


# ============ Writing Records ============


class DocumentNote(BaseModel):
    id: str = Field(default_factory=new_record_id)
    content: str
    created_at: Timestamp = Field(default_factory=utc_now)


class DocumentRecord(BookScopedRecord):
    title: str
    content: str = ""
    group_id: Optional[str] = None
    order: Optional[int] = None
    status: Literal["draft", "in-progress", "complete"] = "draft"
    target: Optional[int] = Field(default=None, ge=0)
    notes: List[DocumentNote] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    deadline: Optional[Timestamp] = None
    created_at: Timestamp = Field(default_factory=utc_now)
    updated_at: Timestamp = Field(default_factory=utc_now)


class GroupRecord(BookScopedRecord):
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    parent_id: Optional[str] = None
    order: int = 0
    is_expanded: bool = True
    type: Literal["folder", "filter"] = "folder"


class NoteRecord(BookScopedRecord):
    title: str
    content: str = ""
    tags: List[str] = Field(default_factory=list)
    created_at: Timestamp = Field(default_factory=utc_now)
    updated_at: Timestamp = Field(default_factory=utc_now)


# ============ Character Records ============


class CharacterArcPoint(BaseModel):
    beat_id: str
    emotional_state: Dict[str, float] = Field(default_factory=dict)
    notes: Optional[str] = None


class CharacterRecord(BookScopedRecord):
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    traits: ScalarMap = Field(default_factory=dict)
    want: Optional[str] = None
    need: Optional[str] = None
    arc: List[CharacterArcPoint] = Field(default_factory=list)
    is_series_character: bool = False


RelationshipType = Literal[
    "ally", "friend", "lover", "family", "enemy", "rival", "mentor", "neutral"
]


class RelationshipRecord(BookScopedRecord):
    from_id: str
    to_id: str
    type: RelationshipType = "neutral"
    strength: int = Field(default=50, ge=0, le=100)
    description: Optional[str] = None

    def pair(self) -> frozenset:
        """Unordered endpoint pair"""
        return frozenset((self.from_id, self.to_id))


# ============ World Records ============


class Coordinates(BaseModel):
    x: float
    y: float


class LocationRecord(BookScopedRecord):
    name: str
    type: Literal["city", "building", "region", "landmark", "natural", "other"] = "other"
    description: Optional[str] = None
    parent_id: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    color: Optional[str] = None
    properties: ScalarMap = Field(default_factory=dict)
    connections: List[str] = Field(default_factory=list)
    is_series_location: bool = False


class WorldEventRecord(BookScopedRecord):
    name: str
    description: Optional[str] = None
    date: str = ""
    type: Literal[
        "historical", "political", "natural", "cultural", "personal", "other"
    ] = "other"
    location_ids: List[str] = Field(default_factory=list)
    character_ids: List[str] = Field(default_factory=list)
    importance: int = Field(default=5, ge=0, le=10)
    consequences: Optional[str] = None
    is_series_event: bool = False

    def stars(self) -> int:
        """Importance on the 0-5 star display scale"""
        return (self.importance + 1) // 2


class WorldRuleRecord(BookScopedRecord):
    category: Literal[
        "magic", "technology", "society", "physics", "culture", "other"
    ] = "other"
    title: str
    description: str = ""
    examples: List[str] = Field(default_factory=list)
    limitations: List[str] = Field(default_factory=list)
    is_series_rule: bool = False


# ============ Plot Records ============


class BeatRecord(ProjectScopedRecord):
    name: str
    percentage: float = Field(default=0.0, ge=0, le=100)
    description: str = ""
    content: Optional[str] = None
    word_count: Optional[int] = None
    scene_ids: List[str] = Field(default_factory=list)
    is_completed: bool = False


class ThemeRecord(ProjectScopedRecord):
    name: str
    description: str = ""
    scene_ids: List[str] = Field(default_factory=list)
    intensity: Dict[str, float] = Field(default_factory=dict)


class ConflictRecord(ProjectScopedRecord):
    type: Literal["internal", "external"] = "external"
    description: str = ""
    intensity: int = Field(default=5, ge=1, le=10)
    beat_id: Optional[str] = None
    scene_ids: List[str] = Field(default_factory=list)


class BStoryRecord(ProjectScopedRecord):
    character_id: str
    name: str
    description: str = ""
    scene_ids: List[str] = Field(default_factory=list)
    thematic_impact: Dict[str, float] = Field(default_factory=dict)


class PlotStructureRecord(BookScopedRecord):
    target_word_count: int = 0
    beats: List[BeatRecord] = Field(default_factory=list)
    themes: List[ThemeRecord] = Field(default_factory=list)
    conflicts: List[ConflictRecord] = Field(default_factory=list)
    b_stories: List[BStoryRecord] = Field(default_factory=list)
    created_at: Timestamp = Field(default_factory=utc_now)
    updated_at: Timestamp = Field(default_factory=utc_now)


class PlotTemplateRequest(BaseModel):
    book_id: str
    genre: Optional[str] = None
    target_word_count: int = Field(default=80000, gt=0)


# ============ Settings ============


class AppSettings(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    openai_key: Optional[str] = None
    anthropic_key: Optional[str] = None
    auto_save: bool = True
    writing_mode: Literal["focus", "standard", "typewriter"] = "standard"
    font_size: int = 16
    line_height: float = 1.7
    theme: Literal["light", "dark"] = "dark"
    credits: int = 0
    free_queries_left: int = 5


# ============ Export ============


class ProjectBundle(BaseModel):
    """Everything stored for one project, read at a single point in time"""

    schema_version: int
    exported_at: Timestamp = Field(default_factory=utc_now)
    project: Optional[ProjectRecord] = None
    books: List[BookRecord] = Field(default_factory=list)
    documents: List[DocumentRecord] = Field(default_factory=list)
    groups: List[GroupRecord] = Field(default_factory=list)
    characters: List[CharacterRecord] = Field(default_factory=list)
    relationships: List[RelationshipRecord] = Field(default_factory=list)
    locations: List[LocationRecord] = Field(default_factory=list)
    world_events: List[WorldEventRecord] = Field(default_factory=list)
    world_rules: List[WorldRuleRecord] = Field(default_factory=list)
    notes: List[NoteRecord] = Field(default_factory=list)
    plot_structures: List[PlotStructureRecord] = Field(default_factory=list)
    beats: List[BeatRecord] = Field(default_factory=list)
    themes: List[ThemeRecord] = Field(default_factory=list)
    conflicts: List[ConflictRecord] = Field(default_factory=list)
    b_stories: List[BStoryRecord] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str
    storage: str
    schema_version: int
