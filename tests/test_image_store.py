import threading
from concurrent.futures import ThreadPoolExecutor
from uuid import uuid4

from PIL import Image, ImageDraw

from models.printer_status import PrinterInfo
from services.image_store import ImageStore
from services.transform import process, process_initial

INFO = PrinterInfo(dpi=180, max_px=128)


def make_image(status, name="img", size=(60, 40)):
    img = Image.new("RGB", size, (255, 255, 255))
    ImageDraw.Draw(img).rectangle((5, 5, 20, 20), fill=(100, 100, 100))
    return process_initial(img, name, status, INFO)


def test_insert_then_get(status):
    store = ImageStore()
    image = make_image(status)

    image_id = store.insert(image)
    fetched = store.get(image_id)

    assert fetched is not None
    assert fetched == image
    assert fetched.processed.tobytes() == image.processed.tobytes()


def test_get_returns_a_copy(status):
    store = ImageStore()
    image_id = store.insert(make_image(status))

    fetched = store.get(image_id)
    fetched.threshold = 3

    assert store.get(image_id).threshold == 127


def test_delete_one(status):
    store = ImageStore()
    image_id = store.insert(make_image(status))

    removed = store.delete_one(image_id)

    assert removed is not None
    assert store.get(image_id) is None
    assert store.delete_one(image_id) is None


def test_delete_all(status):
    store = ImageStore()
    for i in range(3):
        store.insert(make_image(status, name=f"img{i}"))

    store.delete_all()
    store.delete_all()

    assert store.list() == []
    assert len(store) == 0


def test_list_is_sorted_by_id(status):
    store = ImageStore()
    ids = []

    def insert(i):
        ids.append(store.insert(make_image(status, name=f"img{i}")))

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(insert, range(40)))

    listed = [image_id for image_id, _ in store.list()]
    assert listed == sorted(ids)
    assert len(set(listed)) == 40


def test_list_preserves_insert_order(status):
    store = ImageStore()
    names = ["first", "second", "third"]
    for name in names:
        store.insert(make_image(status, name=name))
    assert [image.file_name for _, image in store.list()] == names


def test_mutate_unknown_id_reports_absence(status):
    store = ImageStore()
    image_id = store.insert(make_image(status))
    called = []

    assert store.mutate(uuid4(), called.append) is False
    assert store.set_threshold(uuid4(), 10, status) is False
    assert store.set_inverted(uuid4(), True, status) is False
    assert called == []
    assert [i for i, _ in store.list()] == [image_id]
    assert store.get(image_id).threshold == 127


def test_mutate_runs_updater(status):
    store = ImageStore()
    image_id = store.insert(make_image(status))

    assert store.mutate(image_id, lambda image: setattr(image, "file_name", "renamed")) is True
    assert store.get(image_id).file_name == "renamed"


def test_set_threshold_regenerates_processed(status):
    store = ImageStore()
    image_id = store.insert(make_image(status))
    original = store.get(image_id).original

    assert store.set_threshold(image_id, 200, status) is True

    updated = store.get(image_id)
    assert updated.threshold == 200
    assert updated.processed.tobytes() == process(original, status, 200, False).tobytes()
    assert (updated.width, updated.height) == updated.processed.size


def test_set_threshold_is_idempotent(status):
    store = ImageStore()
    image_id = store.insert(make_image(status))

    store.set_threshold(image_id, 150, status)
    first = store.get(image_id).processed.tobytes()
    store.set_threshold(image_id, 150, status)

    assert store.get(image_id).processed.tobytes() == first


def test_set_inverted_keeps_threshold(status):
    store = ImageStore()
    image_id = store.insert(make_image(status))
    store.set_threshold(image_id, 200, status)

    assert store.set_inverted(image_id, True, status) is True

    updated = store.get(image_id)
    assert updated.threshold == 200
    assert updated.inverted is True
    assert updated.processed.tobytes() == process(updated.original, status, 200, True).tobytes()


def test_concurrent_mutations_on_distinct_ids(status):
    store = ImageStore()
    ids = [store.insert(make_image(status, name=f"img{i}")) for i in range(16)]

    def update(args):
        index, image_id = args
        return store.set_threshold(image_id, 100 + index, status)

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(update, enumerate(ids)))

    assert all(results)
    listed = dict(store.list())
    for index, image_id in enumerate(ids):
        assert listed[image_id].threshold == 100 + index


def test_concurrent_updates_on_same_id_stay_consistent(status):
    store = ImageStore()
    image_id = store.insert(make_image(status))
    start = threading.Barrier(8)

    def update(i):
        start.wait()
        if i % 2:
            store.set_inverted(image_id, bool(i % 4 == 1), status)
        else:
            store.set_threshold(image_id, 50 + i * 10, status)

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(update, range(8)))

    final = store.get(image_id)
    expected = process(final.original, status, final.threshold, final.inverted)
    assert final.processed.tobytes() == expected.tobytes()


def test_readers_never_see_half_updated_entries(status):
    store = ImageStore()
    image_id = store.insert(make_image(status))
    original = store.get(image_id).original
    expected = {
        (threshold, inverted): process(original, status, threshold, inverted).tobytes()
        for threshold in (20, 127, 220)
        for inverted in (False, True)
    }
    stop = threading.Event()
    mismatches = []

    def read():
        while not stop.is_set():
            image = store.get(image_id)
            if image.processed.tobytes() != expected[(image.threshold, image.inverted)]:
                mismatches.append(image)

    readers = [threading.Thread(target=read) for _ in range(4)]
    for reader in readers:
        reader.start()
    try:
        for threshold in (20, 220, 127) * 5:
            store.set_threshold(image_id, threshold, status)
            store.set_inverted(image_id, threshold == 220, status)
    finally:
        stop.set()
        for reader in readers:
            reader.join()

    assert mismatches == []
