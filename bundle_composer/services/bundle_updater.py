"""Sequential composite-and-write-back over a batch of bundle products.

Products are handled one at a time so that progress can be reported as a
simple sequence of states::

    IDLE -> BUILDING_COMPOSITE(i) -> UPDATING_PRODUCT(i) -> ... -> DONE

A failure for one product is recorded in its outcome and the batch moves on.
"""
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable

from ..errors import BundleImageError
from ..models import BatchOutcome, ProductImageGroup

log = logging.getLogger(__name__)


class BatchPhase(str, Enum):
    IDLE = "idle"
    BUILDING_COMPOSITE = "building_composite"
    UPDATING_PRODUCT = "updating_product"
    DONE = "done"


@dataclass(frozen=True)
class BatchProgress:
    phase: BatchPhase
    completed: int
    total: int
    product_index: int | None = None
    step: str = ""

    def to_dict(self) -> dict:
        return {
            "phase": self.phase.value,
            "productIndex": self.product_index,
            "completed": self.completed,
            "total": self.total,
            "step": self.step,
        }


def bundle_alt_text(product_title: str) -> str:
    return f"{product_title} Bundle Components"


class BundleImageUpdater:
    """Build a composite for each group and, with ``write_back``, save it to the product.

    ``composer`` needs ``build(image_urls) -> CompositeResult``; ``shopify``
    needs ``set_product_image(product_id, image_url, alt_text) -> {"mediaCount": n}``.
    """

    def __init__(self, composer, shopify=None, *, write_back: bool = True,
                 on_progress: Callable[[BatchProgress], None] | None = None,
                 cancel_event: threading.Event | None = None):
        if write_back and shopify is None:
            raise ValueError("shopify client is required when write_back is enabled")
        self.composer = composer
        self.shopify = shopify
        self.write_back = write_back
        self.on_progress = on_progress
        self.cancel_event = cancel_event
        self.progress = BatchProgress(BatchPhase.IDLE, completed=0, total=0)

    def _transition(self, phase: BatchPhase, completed: int, total: int,
                    index: int | None = None, step: str = ""):
        self.progress = BatchProgress(phase, completed=completed, total=total, product_index=index, step=step)
        if self.on_progress is not None:
            self.on_progress(self.progress)

    def _cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()

    def _process(self, index: int, group: ProductImageGroup, completed: int, total: int) -> BatchOutcome:
        self._transition(BatchPhase.BUILDING_COMPOSITE, completed, total, index,
                         f"Combining {len(group.image_urls)} images for {group.product_title}")
        try:
            composite = self.composer.build(group.image_urls)
        except BundleImageError as e:
            log.error("Composite failed for %s: %s", group.product_id, e)
            return BatchOutcome(group.product_id, group.product_title, success=False, error=str(e))
        except Exception as e:
            log.exception("Unexpected composite failure for %s", group.product_id)
            return BatchOutcome(group.product_id, group.product_title, success=False, error=str(e))

        if not self.write_back:
            return BatchOutcome(group.product_id, group.product_title, success=True,
                                combined_image_url=composite.combined_image_url)

        self._transition(BatchPhase.UPDATING_PRODUCT, completed, total, index,
                         f"Updating {group.product_title}")
        try:
            result = self.shopify.set_product_image(
                group.product_id, composite.combined_image_url, bundle_alt_text(group.product_title)
            )
        except Exception as e:
            # The composite exists even though it was not saved; keep its URL for a manual retry.
            log.error("Product update failed for %s: %s", group.product_id, e)
            return BatchOutcome(group.product_id, group.product_title, success=False,
                                combined_image_url=composite.combined_image_url, error=str(e))

        return BatchOutcome(group.product_id, group.product_title, success=True,
                            combined_image_url=composite.combined_image_url,
                            media_count=result.get("mediaCount"))

    def run(self, groups: Iterable[ProductImageGroup]) -> list[BatchOutcome]:
        groups = list(groups)
        total = len(groups)
        outcomes: list[BatchOutcome] = []
        self._transition(BatchPhase.IDLE, 0, total, step="Starting")

        for index, group in enumerate(groups):
            if self._cancelled():
                outcome = BatchOutcome(group.product_id, group.product_title, success=False,
                                       error="Batch cancelled")
            else:
                outcome = self._process(index, group, len(outcomes), total)
            outcomes.append(outcome)
            log.info("Processed %d/%d: %s success=%s", len(outcomes), total, group.product_id, outcome.success)

        succeeded = sum(1 for o in outcomes if o.success)
        self._transition(BatchPhase.DONE, len(outcomes), total,
                         step=f"{succeeded} of {total} products processed")
        return outcomes
