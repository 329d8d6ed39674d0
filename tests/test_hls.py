import os

import pytest

from mtvboard.hls import (
    CHUNK_COUNT,
    FRAMES_PER_CHUNK,
    VIDEO_PID,
    HlsServer,
    delete_files_from_folder,
    is_frame_start,
)


def ts_packet(pid, unit_start, fill=0):
    b1 = (0x40 if unit_start else 0) | ((pid >> 8) & 0x1F)
    return bytes([0x47, b1, pid & 0xFF, 0x10]) + bytes([fill]) * 184


def folder(tmp_path):
    return str(tmp_path) + os.sep


def test_is_frame_start_video_pid():
    assert is_frame_start(ts_packet(VIDEO_PID, True)) is True


@pytest.mark.parametrize("pid,unit_start", [(VIDEO_PID, False), (100, True), (0, True)])
def test_is_frame_start_rejects(pid, unit_start):
    assert is_frame_start(ts_packet(pid, unit_start)) is False


def test_is_frame_start_short_data():
    assert is_frame_start(b"\x47") is False


def test_delete_files_from_folder(tmp_path):
    (tmp_path / "a.ts").write_bytes(b"x")
    (tmp_path / "b.TS").write_bytes(b"x")
    (tmp_path / "keep.txt").write_bytes(b"x")
    (tmp_path / "sub.ts").mkdir()
    delete_files_from_folder(str(tmp_path), "*.ts")
    assert sorted(p.name for p in tmp_path.iterdir()) == ["keep.txt", "sub.ts"]


def test_delete_files_missing_folder_is_noop(tmp_path):
    delete_files_from_folder(str(tmp_path / "missing"), "*.ts")
    assert not (tmp_path / "missing").exists()


def test_server_clears_old_files(tmp_path):
    (tmp_path / "old.m3u8").write_text("x")
    (tmp_path / "media_7.ts").write_bytes(b"x")
    with HlsServer(folder(tmp_path)):
        names = sorted(p.name for p in tmp_path.iterdir())
    assert names == ["media_0.ts"]


def test_first_split_writes_playlist(tmp_path):
    frame = ts_packet(VIDEO_PID, True)
    with HlsServer(folder(tmp_path)) as server:
        for _ in range(FRAMES_PER_CHUNK):
            server.add_packet(frame)
        assert server.cnt_chunk == 1
    assert (tmp_path / "playlist.m3u8").read_text() == (
        "#EXTM3U\n"
        "#EXT-X-VERSION:3\n"
        "#EXT-X-MEDIA-SEQUENCE:0\n"
        "#EXT-X-TARGETDURATION:2\n"
        "#EXTINF:2\n"
        "media_0.ts\n"
    )
    assert (tmp_path / "media_0.ts").stat().st_size == (FRAMES_PER_CHUNK - 1) * len(frame)
    assert (tmp_path / "media_1.ts").stat().st_size == len(frame)


def test_non_video_packets_never_split(tmp_path):
    packet = ts_packet(200, True)
    with HlsServer(folder(tmp_path)) as server:
        for _ in range(FRAMES_PER_CHUNK * 2):
            server.add_packet(packet)
    assert not (tmp_path / "playlist.m3u8").exists()
    assert (tmp_path / "media_0.ts").stat().st_size == FRAMES_PER_CHUNK * 2 * len(packet)


def test_playlist_slides_and_old_segments_removed(tmp_path):
    frame = ts_packet(VIDEO_PID, True)
    splits = CHUNK_COUNT + 2
    with HlsServer(folder(tmp_path)) as server:
        for _ in range(FRAMES_PER_CHUNK * splits):
            server.add_packet(frame)
    lines = (tmp_path / "playlist.m3u8").read_text().splitlines()
    assert sum(line.startswith("#EXTINF") for line in lines) == CHUNK_COUNT
    assert f"#EXT-X-MEDIA-SEQUENCE:{splits - CHUNK_COUNT}" in lines
    assert lines[-1] == f"media_{splits - 1}.ts"
    assert not (tmp_path / "media_0.ts").exists()
    assert (tmp_path / "media_1.ts").exists()