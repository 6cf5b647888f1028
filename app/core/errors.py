class NotFoundError(LookupError):
    """Risorsa assente, di un altro teacher o nello stato sbagliato.

    I tre casi non vengono distinti di proposito.
    """


class DuplicateSubmissionError(Exception):
    """Lo studente ha già consegnato per questo assignment."""
