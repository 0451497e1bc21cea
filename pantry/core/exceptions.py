class PantryValidationError(Exception):
    """
    Erreur métier "utilisateur" (HTTP 400).
    Porte le champ concerné + un code stable + un message lisible.
    """

    field = "non_field_errors"

    def __init__(self, code: str, message: str, field: str | None = None):
        super().__init__(message)
        self.code = code
        self.message = message
        if field is not None:
            self.field = field

    def as_detail(self) -> dict:
        return {self.field: [self.message]}


class NameValidationError(PantryValidationError):
    field = "name"

    TOO_LONG = "too_long"
    TOO_SHORT = "too_short"
    TOO_FEW_LETTERS = "too_few_letters"
    EXTRA_SPACES = "extra_spaces"
    REPEATED_WORDS = "repeated_words"
    DUPLICATE_NAME = "duplicate_name"


class ItemLimitError(PantryValidationError):
    field = "item_limit"


class LanguageStateError(PantryValidationError):
    field = "active"
