"""External collaborators: storage, question search, import and export."""

from .archive import build_archive, export_lesson_archive, export_project
from .importers import (
    import_markup,
    import_project_json,
    import_script,
    import_style,
    read_text_file,
)
from .questions import (
    QuestionDetail,
    QuestionSearch,
    SearchController,
    SearchPage,
    StackExchangeClient,
    build_lesson,
)
from .storage import (
    STARTER_PROJECT,
    CachedSearch,
    JsonFileStore,
    KeyValueStore,
    LessonStore,
    MemoryStore,
    ProjectStore,
    SearchCache,
)

__all__ = [
    "build_archive",
    "export_project",
    "export_lesson_archive",
    "import_markup",
    "import_style",
    "import_script",
    "import_project_json",
    "read_text_file",
    "QuestionSearch",
    "QuestionDetail",
    "SearchPage",
    "SearchController",
    "StackExchangeClient",
    "build_lesson",
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "ProjectStore",
    "SearchCache",
    "CachedSearch",
    "LessonStore",
    "STARTER_PROJECT",
]
