"""Thread-safe in-memory store for uploaded label images.

Entries are keyed by time-ordered UUIDs so sorting by id gives upload
order. Reads hand out shallow copies of the entry: the pixel buffers are
shared, which is safe because `original` is never modified and
`processed` is only ever replaced with a new image.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Callable, Dict, List, Optional, Tuple
from uuid import UUID

from models.printer_status import PrinterStatus
from models.stored_image import StoredImage
from services.transform import process
from utils.ids import new_image_id
from utils.rwlock import RWLock

LOGGER = logging.getLogger(__name__)


class ImageStore:
	"""Keyed collection of StoredImage entries guarded by a readers-writer lock."""

	def __init__(self) -> None:
		self._lock = RWLock()
		self._images: Dict[UUID, StoredImage] = {}
		self._generations: Dict[UUID, int] = {}

	def insert(self, image: StoredImage) -> UUID:
		"""Store an image under a fresh id and return the id."""
		image_id = new_image_id()
		with self._lock.write():
			self._images[image_id] = image
			self._generations[image_id] = 0
		LOGGER.info("Stored image %s (%s)", image_id, image.file_name)
		return image_id

	def list(self) -> List[Tuple[UUID, StoredImage]]:
		"""Return (id, image) pairs in ascending id order, i.e. upload order."""
		with self._lock.read():
			items = [(image_id, dataclasses.replace(image)) for image_id, image in self._images.items()]
		items.sort(key=lambda item: item[0])
		return items

	def get(self, image_id: UUID) -> Optional[StoredImage]:
		with self._lock.read():
			image = self._images.get(image_id)
			return dataclasses.replace(image) if image is not None else None

	def mutate(self, image_id: UUID, updater: Callable[[StoredImage], None]) -> bool:
		"""Run `updater` on the entry while holding the write lock.

		Returns False without calling `updater` if the id is unknown.
		"""
		with self._lock.write():
			image = self._images.get(image_id)
			if image is None:
				return False
			updater(image)
			self._generations[image_id] += 1
			return True

	def set_threshold(self, image_id: UUID, threshold: int, status: PrinterStatus) -> bool:
		"""Re-derive the processed buffer with a new threshold."""
		return self._rederive(image_id, status, threshold=threshold)

	def set_inverted(self, image_id: UUID, inverted: bool, status: PrinterStatus) -> bool:
		"""Re-derive the processed buffer with a new invert flag."""
		return self._rederive(image_id, status, inverted=inverted)

	def _rederive(
		self,
		image_id: UUID,
		status: PrinterStatus,
		threshold: Optional[int] = None,
		inverted: Optional[bool] = None,
	) -> bool:
		# Processing runs outside the lock; the result is only committed if
		# nobody else changed the entry in the meantime, otherwise redo it.
		while True:
			with self._lock.read():
				image = self._images.get(image_id)
				if image is None:
					return False
				generation = self._generations[image_id]
				original = image.original
				old_threshold, old_inverted = image.threshold, image.inverted

			new_threshold = old_threshold if threshold is None else threshold
			new_inverted = old_inverted if inverted is None else inverted
			processed = process(original, status, new_threshold, new_inverted)

			with self._lock.write():
				image = self._images.get(image_id)
				if image is None:
					return False
				if self._generations[image_id] != generation:
					continue
				image.threshold = new_threshold
				image.inverted = new_inverted
				image.replace_processed(processed)
				self._generations[image_id] = generation + 1

			LOGGER.debug(
				"Image %s: threshold %s -> %s, inverted %s -> %s",
				image_id,
				old_threshold,
				new_threshold,
				old_inverted,
				new_inverted,
			)
			return True

	def delete_one(self, image_id: UUID) -> Optional[StoredImage]:
		"""Remove and return an entry; None if it was not present."""
		with self._lock.write():
			image = self._images.pop(image_id, None)
			self._generations.pop(image_id, None)
		if image is not None:
			LOGGER.info("Deleted image %s", image_id)
		return image

	def delete_all(self) -> None:
		with self._lock.write():
			count = len(self._images)
			self._images.clear()
			self._generations.clear()
		LOGGER.info("Cleared %d stored image(s)", count)

	def __len__(self) -> int:
		with self._lock.read():
			return len(self._images)
