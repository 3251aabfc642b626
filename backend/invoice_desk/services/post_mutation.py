"""Post-Mutation Effects — invalidate the listing view, then navigate to it.

Invariants:
    - Invalidation completes BEFORE the Navigate outcome exists: the redirect
      target can never be served from a pre-mutation cache entry
"""

from invoice_desk.core.domain_types import INVOICES_PATH
from invoice_desk.core.mutation_outcome import Navigate
from invoice_desk.infrastructure.view_cache import ViewCache


def revalidate_and_redirect(cache: ViewCache, path: str = INVOICES_PATH) -> Navigate:
    cache.invalidate(path)
    return Navigate(location=path)
