import json

from loguru import logger

import main


def _run_main(monkeypatch, tmp_path, argv):
    seen = {}

    async def fake_run(settings, address):
        seen['address'] = address
        return 0

    monkeypatch.setattr(main, "run", fake_run)
    monkeypatch.setattr(main.sys, "argv", ["main.py"] + argv)
    monkeypatch.setenv("TRACKER_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("TRACKER_SERVER_ADDRESS", raising=False)
    try:
        code = main.main()
    finally:
        logger.remove()
    return code, seen.get('address')


def test_argument_address_is_remembered(monkeypatch, tmp_path):
    code, address = _run_main(monkeypatch, tmp_path, ["play.example.net:25570"])

    assert code == 0
    assert address == "play.example.net:25570"
    saved = json.loads((tmp_path / "settings.json").read_text(encoding="utf-8"))
    assert saved['server_address'] == "play.example.net:25570"

    code, address = _run_main(monkeypatch, tmp_path, [])

    assert code == 0
    assert address == "play.example.net:25570"


def test_missing_address_exits_with_error(monkeypatch, tmp_path):
    code, address = _run_main(monkeypatch, tmp_path, [])

    assert code == 2
    assert address is None
