class FinlangError(Exception):
    pass


class StructuralViolation(FinlangError, ValueError):
    """A state or symbol reference points outside the declared sets."""

    pass


class UnsupportedGrammarShape(FinlangError, ValueError):
    def __init__(self, message: str, head=None, body=None) -> None:
        self.head = head
        self.body = body
        super().__init__(message)

    def __str__(self) -> str:
        if self.head is None:
            return super().__str__()
        head = " ".join(self.head)
        body = " ".join(self.body) if self.body else "ε"
        return f"{super().__str__()}: {head} -> {body}"


class GenerationError(FinlangError):
    pass
