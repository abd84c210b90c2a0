"""Etymology graph and custom collation core for conlang dictionaries."""

__version__ = "0.1.0"

from conlang_editor.buffer import InsertBuffer as InsertBuffer
from conlang_editor.collation import (
    CollationTable as CollationTable,
    Collator as Collator,
    uncovered_characters as uncovered_characters,
)
from conlang_editor.exceptions import (
    ConlangEditorError as ConlangEditorError,
    DataImportError as DataImportError,
    DuplicateEntityError as DuplicateEntityError,
    EntityNotFoundError as EntityNotFoundError,
    LoopError as LoopError,
    ParseError as ParseError,
)
from conlang_editor.external import (
    ExternalParentRegistry as ExternalParentRegistry,
)
from conlang_editor.graph import RelationshipGraph as RelationshipGraph
from conlang_editor.lexicon import (
    EntryExistenceOracle as EntryExistenceOracle,
    Lexicon as Lexicon,
)
from conlang_editor.models import (
    ExternalParent as ExternalParent,
    RootEntry as RootEntry,
    ValidationResult as ValidationResult,
)
from conlang_editor.serialization import (
    LexiconDocument as LexiconDocument,
    dump_document as dump_document,
    dump_etymology as dump_etymology,
    load_document as load_document,
    load_etymology as load_etymology,
)
from conlang_editor.validator import validate_etymology as validate_etymology

__all__ = [
    # Core classes
    "RelationshipGraph",
    "ExternalParentRegistry",
    "CollationTable",
    "Collator",
    "InsertBuffer",
    "Lexicon",
    "EntryExistenceOracle",
    "LexiconDocument",
    # Models
    "ExternalParent",
    "RootEntry",
    "ValidationResult",
    # Functions
    "uncovered_characters",
    "dump_etymology",
    "load_etymology",
    "dump_document",
    "load_document",
    "validate_etymology",
    # Exceptions
    "ConlangEditorError",
    "LoopError",
    "EntityNotFoundError",
    "DuplicateEntityError",
    "DataImportError",
    "ParseError",
]
