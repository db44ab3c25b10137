import logging
import threading

from recruiter_finder.models import Confidence, EmailCandidate, SearchHit, Source
from recruiter_finder.resolver import DEFAULT_SOURCES, gather_candidates, resolve_email

LOGGER = logging.getLogger("test")


def _source(*candidates: EmailCandidate):
    def search(_client, _name, _company, _role, *, logger):
        _ = logger
        return list(candidates)

    return search


def _failing_source(_client, _name, _company, _role, *, logger):
    _ = logger
    raise RuntimeError("source exploded")


def _candidate(email: str, source: Source, confidence: Confidence) -> EmailCandidate:
    return EmailCandidate(email=email, source=source, confidence=confidence)


def test_returns_empty_when_all_sources_empty() -> None:
    sources = (_source(), _source(), _source(), _source())
    assert resolve_email(object(), "Jane", "Acme", "Recruiter", logger=LOGGER, sources=sources) == ""


def test_picks_highest_confidence_with_source_order_tiebreak() -> None:
    sources = (
        _source(_candidate("company@acme.io", Source.COMPANY_WEBSITE, Confidence.MEDIUM)),
        _source(_candidate("web@acme.io", Source.WEB_SEARCH, Confidence.MEDIUM)),
        _source(_candidate("social@acme.io", Source.SOCIAL_MEDIA, Confidence.LOW)),
    )
    assert resolve_email(object(), "Jane", "Acme", logger=LOGGER, sources=sources) == "company@acme.io"

    sources = (
        _source(_candidate("web@gmail.com", Source.COMPANY_WEBSITE, Confidence.MEDIUM)),
        _source(_candidate("jane@acme.io", Source.WEB_SEARCH, Confidence.HIGH)),
    )
    assert resolve_email(object(), "Jane", "Acme", logger=LOGGER, sources=sources) == "jane@acme.io"


def test_returns_empty_when_top_candidate_is_malformed() -> None:
    sources = (
        _source(_candidate("not-an-email", Source.COMPANY_WEBSITE, Confidence.HIGH)),
        _source(_candidate("jane@acme.io", Source.WEB_SEARCH, Confidence.MEDIUM)),
    )
    assert resolve_email(object(), "Jane", "Acme", logger=LOGGER, sources=sources) == ""


def test_failing_source_does_not_abort_others() -> None:
    sources = (
        _failing_source,
        _source(_candidate("jane@acme.io", Source.WEB_SEARCH, Confidence.MEDIUM)),
    )
    assert resolve_email(object(), "Jane", "Acme", logger=LOGGER, sources=sources) == "jane@acme.io"


def test_gather_keeps_source_order_regardless_of_completion_order() -> None:
    first_may_finish = threading.Event()

    def slow(_client, _name, _company, _role, *, logger):
        first_may_finish.wait(timeout=5)
        return [_candidate("slow@acme.io", Source.COMPANY_WEBSITE, Confidence.LOW)]

    def fast(_client, _name, _company, _role, *, logger):
        first_may_finish.set()
        return [_candidate("fast@acme.io", Source.WEB_SEARCH, Confidence.LOW)]

    candidates = gather_candidates(object(), "Jane", "Acme", None, logger=LOGGER, sources=(slow, fast))
    assert [item.email for item in candidates] == ["slow@acme.io", "fast@acme.io"]


def test_default_sources_run_against_search_client() -> None:
    class Client:
        def __init__(self) -> None:
            self.queries: list[str] = []
            self._lock = threading.Lock()

        def search(self, query: str, num: int):
            with self._lock:
                self.queries.append(query)
            if "site:acme.com" in query:
                return [SearchHit(title="", snippet="press@acme.com", link="")]
            return [SearchHit(title="", snippet="jane@gmail.com", link="")]

    client = Client()
    assert resolve_email(client, "Jane", "Acme", "Recruiter", logger=LOGGER) == "press@acme.com"
    assert len(client.queries) == len(DEFAULT_SOURCES)
