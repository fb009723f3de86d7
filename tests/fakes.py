# Fake providers used instead of the real API clients


class FakeModelAnalyzer:
    """Stands in for OpenAIAnalyzerService."""

    def __init__(self, result=None, error=None):
        self.result = result if result is not None else {}
        self.error = error
        self.calls = 0

    def analyze(self, file_bytes, media_type):
        self.calls += 1
        if self.error:
            raise self.error
        return self.result


class FakePageProvider:
    """Stands in for the Document AI / Vision / Tesseract services."""

    def __init__(self, pages=None, error=None):
        self.pages = pages if pages is not None else []
        self.error = error
        self.calls = []

    def extract_pages(self, file_bytes, media_type):
        self.calls.append(media_type)
        if self.error:
            raise self.error
        return self.pages
