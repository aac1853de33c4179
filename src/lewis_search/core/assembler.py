"""Assembly of query result fragments into one response document."""

import logging
import threading
from typing import Iterable, Optional, Tuple

from .exceptions import LewisSearchError, EvaluationError, SearchCancelledError

logger = logging.getLogger(__name__)

DEFAULT_ROOT_TAG = "LEWIS"


class ResultAssembler:
    """
    Frames serialized records inside a single root element.

    Fragments are consumed in one forward pass and are not validated; the
    output is well-formed as long as every fragment is.
    """

    def __init__(self, root_tag: str = DEFAULT_ROOT_TAG):
        self.root_tag = root_tag

    def assemble(
        self,
        fragments: Iterable[str],
        cancel_event: Optional[threading.Event] = None
    ) -> str:
        """
        Drain the fragment sequence and wrap it in the root element.

        Args:
            fragments: Serialized records, in engine order
            cancel_event: Checked before each fragment; once set, draining stops

        Returns:
            ``<ROOT>`` + fragments concatenated without separators + ``</ROOT>``

        Raises:
            SearchCancelledError: If cancel_event is set before the sequence is exhausted
            EvaluationError: If the sequence fails partway; nothing is returned
        """
        document, _ = self.assemble_counted(fragments, cancel_event)
        return document

    def assemble_counted(
        self,
        fragments: Iterable[str],
        cancel_event: Optional[threading.Event] = None
    ) -> Tuple[str, int]:
        """Like assemble(), also returning the number of fragments framed."""
        parts = [f"<{self.root_tag}>"]
        iterator = iter(fragments)
        count = 0

        try:
            while True:
                if cancel_event is not None and cancel_event.is_set():
                    raise SearchCancelledError(f"Search cancelled after {count} fragments")
                try:
                    fragment = next(iterator)
                except StopIteration:
                    break
                parts.append(fragment)
                count += 1
        except LewisSearchError:
            raise
        except Exception as e:
            logger.error(f"Result sequence failed after {count} fragments: {str(e)}")
            raise EvaluationError(f"Failed to read query results: {str(e)}") from e
        finally:
            # Release the engine cursor on every exit path
            close = getattr(iterator, "close", None)
            if close is not None:
                close()

        parts.append(f"</{self.root_tag}>")
        return "".join(parts), count


def assemble(fragments: Iterable[str], root_tag: str = DEFAULT_ROOT_TAG) -> str:
    """Assemble fragments with a one-off assembler."""
    return ResultAssembler(root_tag=root_tag).assemble(fragments)
