"""Console progress reporting for download batches."""

from tqdm import tqdm

from fontgrab.core.models import FontRecord


class ConsoleProgress:
    """
    Progress callback that drives a tqdm bar.

    Pass an instance as the ``progress_callback`` of a download batch and
    call ``close()`` once the batch returns.
    """

    def __init__(self, description: str = "Downloading", disable: bool = False):
        self.description = description
        self.disable = disable
        self.pbar: tqdm | None = None
        self.last_position = 0

    def __call__(self, position: int, total: int, font: FontRecord) -> None:
        if self.pbar is None:
            self.pbar = tqdm(total=total, desc=self.description, unit="font", disable=self.disable)

        # The callback fires before each attempt, so the previous record is done
        self.pbar.update(position - 1 - self.last_position)
        self.last_position = position - 1
        self.pbar.set_postfix_str(font.name, refresh=True)

    def close(self) -> None:
        """Mark the final record done and close the bar."""
        if self.pbar is None:
            return
        self.pbar.update(self.pbar.total - self.last_position)
        self.pbar.close()
        self.pbar = None
