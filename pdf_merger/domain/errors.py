class PdfMergerError(Exception):
    pass


class ValidationError(PdfMergerError):
    pass


class NotFoundError(PdfMergerError):
    pass


class PageNotFoundError(PdfMergerError):
    def __init__(self, page_number: int, source: str) -> None:
        super().__init__(
            f"Could not load page '{page_number}' in PDF '{source}'. Check that the page exists."
        )
        self.page_number = page_number
        self.source = source


class EmptyJobError(PdfMergerError):
    pass


class NormalizationFailure(PdfMergerError):
    pass


class ParsingError(PdfMergerError):
    pass


class FileIOError(PdfMergerError):
    pass


class JobStateError(PdfMergerError):
    pass
