"""Cutting a transport stream into HLS segments with a sliding playlist."""

from __future__ import annotations

import fnmatch
import logging
import os
import threading
from collections import deque
from dataclasses import dataclass

log = logging.getLogger(__name__)

VIDEO_PID = 101
TARGET_DURATION = 2
CHUNK_COUNT = 10
FRAMES_PER_SECOND = 25
FRAMES_PER_CHUNK = FRAMES_PER_SECOND * TARGET_DURATION
PLAYLIST_NAME = "playlist.m3u8"


def is_frame_start(data: bytes) -> bool:
    """True if the packet starts a payload unit on the video PID."""
    if len(data) < 3:
        return False
    unit_start = bool(data[1] & 0x40)
    pid = ((data[1] & 0x1F) << 8) | data[2]
    return unit_start and pid == VIDEO_PID


def delete_files_from_folder(dir_name: str, pattern: str) -> None:
    """Remove the regular files in *dir_name* whose names match *pattern*."""
    try:
        entries = list(os.scandir(dir_name or "."))
    except FileNotFoundError:
        return
    pattern = pattern.lower()
    for entry in entries:
        if entry.is_file() and fnmatch.fnmatchcase(entry.name.lower(), pattern):
            os.remove(entry.path)


def media_file_name(num: int) -> str:
    return f"media_{num}.ts"


@dataclass(frozen=True)
class _Chunk:
    sequence_number: int
    ext_inf: int
    file_name: str


class HlsServer:
    """Writes packets into numbered segment files and keeps a live playlist."""

    def __init__(self, path_to_video_folder: str = "./") -> None:
        log.debug("creating")
        self.path_to_video_folder = path_to_video_folder
        delete_files_from_folder(path_to_video_folder, "*.m3u8")
        delete_files_from_folder(path_to_video_folder, "*.ts")
        self.split_counter = 0
        self.cnt_chunk = 0
        self.playlist_path = self._full_path(PLAYLIST_NAME)
        self._chunks: deque[_Chunk] = deque(maxlen=CHUNK_COUNT)
        self._lock = threading.Lock()
        self._media = None
        self.media_path = ""
        self._open_media(self.cnt_chunk)

    def _full_path(self, name: str) -> str:
        return os.path.join(self.path_to_video_folder, name)

    def _open_media(self, num: int) -> None:
        self.media_path = self._full_path(media_file_name(num))
        try:
            self._media = open(self.media_path, "wb")
        except OSError as err:
            log.debug("%s: %s", self.media_path, err)
            self._media = None

    def _close_media(self) -> None:
        if self._media is not None:
            self._media.close()
            self._media = None

    def _make_playlist(self, cnt_chunk: int, target_duration: int) -> None:
        try:
            playlist = open(self.playlist_path, "w", newline="\n")
        except OSError as err:
            log.debug("%s: %s", self.playlist_path, err)
            return
        with playlist:
            self._chunks.append(_Chunk(cnt_chunk, target_duration, media_file_name(cnt_chunk)))
            playlist.write("#EXTM3U\n")
            playlist.write("#EXT-X-VERSION:3\n")
            playlist.write(f"#EXT-X-MEDIA-SEQUENCE:{self._chunks[0].sequence_number}\n")
            playlist.write(f"#EXT-X-TARGETDURATION:{target_duration}\n")
            for chunk in self._chunks:
                playlist.write(f"#EXTINF:{chunk.ext_inf}\n")
                playlist.write(f"{chunk.file_name}\n")

    def _split_media(self) -> None:
        self._close_media()
        self._make_playlist(self.cnt_chunk, TARGET_DURATION)
        self.cnt_chunk += 1
        self._open_media(self.cnt_chunk)
        old = self._full_path(media_file_name(self.cnt_chunk - CHUNK_COUNT - 2))
        if os.path.exists(old):
            os.remove(old)

    def add_packet(self, data: bytes) -> None:
        """Append a transport packet, starting a new segment every chunk of frames."""
        with self._lock:
            if is_frame_start(data):
                self.split_counter = (self.split_counter + 1) % FRAMES_PER_CHUNK
                if self.split_counter == 0:
                    self._split_media()
            if self._media is not None:
                self._media.write(data)

    def close(self) -> None:
        with self._lock:
            self._close_media()

    def __enter__(self) -> HlsServer:
        return self

    def __exit__(self, *exc) -> None:
        self.close()