"""
Sonde video basee sur pymediainfo.

MediaInfoExtractor implemente IVideoProbe : pistes video, audio et
sous-titres, duree en secondes, codecs normalises. L'analyse est executee
dans un thread dedie afin d'imposer un delai maximal (30 s par defaut).
"""

from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from pathlib import Path
from typing import Any, Optional

from loguru import logger
from pymediainfo import MediaInfo as PyMediaInfo

from mediavault.core.exceptions import ProbeFailure
from mediavault.core.ports.probes import IVideoProbe
from mediavault.core.value_objects import (
    AudioStream,
    SubtitleStream,
    VideoStream,
    VideoStreamFacts,
)


def _to_float(value: Any) -> Optional[float]:
    """Convertit une valeur mediainfo (int, float ou chaine) en float."""
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _to_int(value: Any) -> Optional[int]:
    number = _to_float(value)
    return int(number) if number is not None else None


class MediaInfoExtractor(IVideoProbe):
    """
    Sonde video utilisant pymediainfo.

    Un timeout ne peut pas interrompre la bibliotheque native : le thread
    d'analyse termine en arriere-plan, le resultat est simplement ignore.
    """

    # Mapping des codecs video vers noms normalises
    VIDEO_CODEC_MAPPING: dict[str, str] = {
        "avc": "h264",
        "h.264": "h264",
        "h264": "h264",
        "hevc": "hevc",
        "h.265": "hevc",
        "h265": "hevc",
        "av1": "av1",
        "vp9": "vp9",
        "mpeg-4 visual": "mpeg4",
        "mpeg-2 video": "mpeg2",
        "xvid": "xvid",
        "divx": "divx",
    }

    # Mapping des codecs audio vers noms normalises
    AUDIO_CODEC_MAPPING: dict[str, str] = {
        "e-ac-3": "eac3",
        "ac-3": "ac3",
        "dts": "dts",
        "truehd": "truehd",
        "mlp fba": "truehd",
        "aac": "aac",
        "flac": "flac",
        "pcm": "pcm",
        "opus": "opus",
        "vorbis": "vorbis",
        "mpeg audio": "mp3",
    }

    def __init__(self, timeout_seconds: float = 30.0, max_workers: int = 4) -> None:
        """
        Initialise la sonde.

        Args :
            timeout_seconds : Delai maximal d'analyse d'un fichier
            max_workers : Nombre d'analyses simultanees
        """
        self._timeout = timeout_seconds
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="mediainfo"
        )

    def probe(self, file_path: Path) -> VideoStreamFacts:
        """
        Extrait les flux d'un fichier video.

        Args :
            file_path : Chemin complet vers le fichier video

        Retourne :
            VideoStreamFacts avec les pistes et la duree

        Raises :
            ProbeFailure : fichier absent, analyse en echec ou delai depasse
        """
        if not file_path.exists():
            raise ProbeFailure(file_path, "video", "file not found")

        future = self._executor.submit(PyMediaInfo.parse, str(file_path), full=True)
        try:
            media_info = future.result(timeout=self._timeout)
        except FutureTimeoutError as e:
            future.cancel()
            raise ProbeFailure(
                file_path, "video", f"timed out after {self._timeout:g}s"
            ) from e
        except Exception as e:
            raise ProbeFailure(file_path, "video", str(e)) from e

        return self._build_facts(media_info)

    def _build_facts(self, media_info: Any) -> VideoStreamFacts:
        """Convertit les pistes mediainfo en VideoStreamFacts."""
        general_tracks = [t for t in media_info.tracks if t.track_type == "General"]
        video_tracks = [t for t in media_info.tracks if t.track_type == "Video"]
        audio_tracks = [t for t in media_info.tracks if t.track_type == "Audio"]
        text_tracks = [t for t in media_info.tracks if t.track_type == "Text"]

        video_streams = tuple(
            VideoStream(
                codec=self._normalize(getattr(t, "format", None), self.VIDEO_CODEC_MAPPING),
                width=_to_int(getattr(t, "width", None)),
                height=_to_int(getattr(t, "height", None)),
                frame_rate=_to_float(getattr(t, "frame_rate", None)),
                hdr_format=getattr(t, "hdr_format", None),
                language=getattr(t, "language", None),
            )
            for t in video_tracks
        )
        audio_streams = tuple(
            AudioStream(
                codec=self._normalize(getattr(t, "format", None), self.AUDIO_CODEC_MAPPING),
                channels=_to_int(getattr(t, "channel_s", None)),
                language=getattr(t, "language", None),
            )
            for t in audio_tracks
        )
        subtitle_streams = tuple(
            SubtitleStream(
                codec=getattr(t, "format", None),
                language=getattr(t, "language", None),
                forced=str(getattr(t, "forced", "")).lower() == "yes",
            )
            for t in text_tracks
        )

        container = None
        if general_tracks:
            container = getattr(general_tracks[0], "format", None)

        return VideoStreamFacts(
            has_video_stream=bool(video_streams),
            has_audio_stream=bool(audio_streams),
            duration_seconds=self._extract_duration(general_tracks, video_tracks),
            video_streams=video_streams,
            audio_streams=audio_streams,
            subtitle_streams=subtitle_streams,
            container=container,
        )

    def _extract_duration(
        self, general_tracks: list, video_tracks: list
    ) -> Optional[float]:
        """
        Extrait la duree en secondes.

        pymediainfo donne la duree en millisecondes, d'abord sur la piste
        generale, a defaut sur la premiere piste video.
        """
        for track in (*general_tracks, *video_tracks):
            duration_ms = _to_float(getattr(track, "duration", None))
            if duration_ms is not None and duration_ms > 0:
                return duration_ms / 1000
        return None

    def _normalize(self, codec: Optional[str], mapping: dict[str, str]) -> Optional[str]:
        """Normalise un nom de codec via un mapping (sous-chaine, insensible a la casse)."""
        if not codec:
            return None
        codec_lower = codec.lower()
        for key, value in mapping.items():
            if key in codec_lower:
                return value
        return codec_lower

    def shutdown(self) -> None:
        """Libere le pool de threads sans attendre les analyses en cours."""
        logger.debug("Arret de la sonde mediainfo")
        self._executor.shutdown(wait=False, cancel_futures=True)
