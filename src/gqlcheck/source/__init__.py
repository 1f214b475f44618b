from gqlcheck.source.edits import apply_edits
from gqlcheck.source.locator import LocatedCallSite, locate_call_sites

__all__ = ["LocatedCallSite", "apply_edits", "locate_call_sites"]
