"""
Errori bloccanti dell'importazione.

Gli errori su singoli campi o righe non arrivano mai qui: i campi vengono
normalizzati a un default e le righe scartate vengono solo contate.
"""


class IngestionError(ValueError):
    """File non importabile. `kind` distingue i tre casi mostrati all'utente."""

    DECODE = "decode"
    EMPTY = "empty"
    NO_VALID_ROWS = "no_valid_rows"

    def __init__(self, kind: str, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
