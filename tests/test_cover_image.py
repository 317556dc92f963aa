import logging

from PIL import Image

from sumstack.components.cover_art import CoverArt
from sumstack.constants import COVER_IMAGE_ENV
from sumstack.events.bus import EVENT_COVER_IMAGE_READY, EVENT_TICK, EventBus
from sumstack.services.cover_image import DEFAULT_COVER_PATH, default_cover_path, fetch_cover_image
from sumstack.systems.cover_image_system import CoverImageSystem
from sumstack.world import create_world


def test_missing_cover_returns_none(tmp_path, caplog):
    with caplog.at_level(logging.WARNING):
        assert fetch_cover_image(tmp_path / "missing.png") is None
    assert "placeholder" in caplog.text


def test_unreadable_cover_returns_none(tmp_path):
    path = tmp_path / "cover.png"
    path.write_bytes(b"definitely not a png")

    assert fetch_cover_image(path) is None


def test_cover_is_converted_and_downscaled(tmp_path):
    path = tmp_path / "cover.png"
    Image.new("RGB", (1280, 640), (200, 40, 20)).save(path)

    image = fetch_cover_image(path, max_dim=640)

    assert image is not None
    assert image.mode == "RGBA"
    assert image.size == (640, 320)


def test_small_cover_keeps_its_size(tmp_path):
    path = tmp_path / "cover.png"
    Image.new("RGBA", (100, 50)).save(path)

    assert fetch_cover_image(path).size == (100, 50)


def test_cover_path_can_be_overridden(monkeypatch, tmp_path):
    monkeypatch.setenv(COVER_IMAGE_ENV, str(tmp_path / "art.png"))
    assert default_cover_path() == tmp_path / "art.png"

    monkeypatch.delenv(COVER_IMAGE_ENV)
    assert default_cover_path() == DEFAULT_COVER_PATH


def test_bundled_cover_loads_by_default(monkeypatch):
    monkeypatch.delenv(COVER_IMAGE_ENV, raising=False)

    image = fetch_cover_image()

    assert DEFAULT_COVER_PATH.is_file()
    assert image is not None
    assert image.mode == "RGBA"
    assert max(image.size) <= 640


def _system(loader, *, background=False):
    bus = EventBus()
    world = create_world(bus)
    ready = []
    bus.subscribe(EVENT_COVER_IMAGE_READY, lambda sender, **kw: ready.append(kw))
    system = CoverImageSystem(world, bus, loader=loader, background=background)
    return bus, world, system, ready


def test_result_is_applied_on_next_tick():
    sentinel = object()
    bus, world, system, ready = _system(lambda: sentinel)

    assert not system.art.loaded
    system.start()
    assert not system.art.loaded

    bus.emit(EVENT_TICK, dt=0.016)

    assert system.art.loaded
    assert system.art.image is sentinel
    assert ready == [{"image": sentinel}]
    assert len(list(world.get_component(CoverArt))) == 1


def test_loader_failure_falls_back_to_placeholder(caplog):
    def broken():
        raise RuntimeError("provider down")

    bus, _, system, ready = _system(broken)

    with caplog.at_level(logging.WARNING):
        system.start()
    bus.emit(EVENT_TICK, dt=0.016)

    assert system.art.loaded
    assert system.art.image is None
    assert ready == [{"image": None}]
    assert "provider failed" in caplog.text


def test_loader_runs_only_once():
    calls = []
    bus, _, system, ready = _system(lambda: calls.append(1) or "img")

    system.start()
    system.start()
    bus.emit(EVENT_TICK, dt=0.016)
    bus.emit(EVENT_TICK, dt=0.016)

    assert calls == [1]
    assert len(ready) == 1


def test_background_fetch_hands_result_to_main_thread():
    bus, _, system, ready = _system(lambda: "img", background=True)

    system.start()
    system._thread.join(timeout=5)
    bus.emit(EVENT_TICK, dt=0.016)

    assert system.art.image == "img"
    assert ready == [{"image": "img"}]
