"""Field extraction probes over parsed film pages."""

from .credits_page import CreditsPage
from .keywords_page import KeywordsPage
from .outcomes import ProbeOutcome, ProbeResult
from .structured import StructuredDataPage
from .title_page import TitlePage

__all__ = [
    "CreditsPage",
    "KeywordsPage",
    "ProbeOutcome",
    "ProbeResult",
    "StructuredDataPage",
    "TitlePage",
]
