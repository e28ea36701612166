from typing import List

from pagescan.checks._common import _finding, describe
from pagescan.models.schemas import Finding
from pagescan.models.taxonomy import Category
from pagescan.snapshot.base import Snapshot

CAPTION_KINDS = ("captions", "subtitles")


class MediaCheck:
    key = "media"
    title = "Video and Audio Content"
    category = Category.MEDIA

    def run(self, snapshot: Snapshot) -> List[Finding]:
        out: List[Finding] = []
        cat = self.category

        for video in snapshot.query("video"):
            where = describe(video)
            if video.attribute("controls") is None:
                out.append(_finding("1.2.1", cat, "video-no-controls", "Video missing controls", where))
            tracks = [t for t in video.query("track")
                      if (t.attribute("kind") or "subtitles").lower() in CAPTION_KINDS]
            if not tracks:
                out.append(_finding("1.2.2", cat, "video-no-captions", "Video missing captions track", where))
            if video.attribute("autoplay") is not None:
                out.append(_finding("2.2.2", cat, "video-autoplay", "Video autoplays", where))

        for audio in snapshot.query("audio"):
            where = describe(audio)
            if audio.attribute("controls") is None:
                out.append(_finding("1.2.1", cat, "audio-no-controls", "Audio missing controls", where))
            if audio.attribute("autoplay") is not None:
                out.append(_finding("1.4.2", cat, "audio-autoplay", "Audio autoplays", where))
        return out
