import base64
import hashlib
import json
import os
from sqlalchemy.orm import Session
from signage.db import SessionLocal, Base, engine
from signage.models.group import ScreenGroup
from signage.models.screen import Screen
from signage.models.playlist import Playlist, PlaylistItem
from signage.models.schedule import Schedule
from signage.models.media import Media
from signage.services.pairing import generate_screen_token
from signage.services.storage import MEDIA_DIR, ensure_storage

SEED_ACCOUNT = os.getenv("SIGNAGE_SEED_ACCOUNT", "demo-account")


def seed() -> None:
    Base.metadata.create_all(bind=engine)
    ensure_storage()
    db: Session = SessionLocal()
    try:
        group = ScreenGroup(owner_account=SEED_ACCOUNT, name="Lobby", description="Lobby displays")
        db.add(group)
        db.commit()
        db.refresh(group)

        png_bytes = base64.b64decode(
            "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR4nGNgYAAAAAMAASsJTYQAAAAASUVORK5CYII="
        )
        media_entries = []
        for filename, label in [("default.png", "Default Placeholder"), ("work.png", "Work Hours Placeholder")]:
            with open(os.path.join(MEDIA_DIR, filename), "wb") as f:
                f.write(png_bytes)
            media = Media(
                owner_account=SEED_ACCOUNT,
                name=label,
                type="image",
                path=f"media/{filename}",
                duration_sec=10,
                size=len(png_bytes),
                checksum=hashlib.sha256(png_bytes).hexdigest(),
            )
            db.add(media)
            db.commit()
            db.refresh(media)
            media_entries.append(media)

        playlist_default = Playlist(owner_account=SEED_ACCOUNT, name="Default")
        playlist_work = Playlist(owner_account=SEED_ACCOUNT, name="Work Hours")
        db.add(playlist_default)
        db.add(playlist_work)
        db.commit()
        db.refresh(playlist_default)
        db.refresh(playlist_work)

        for playlist, media in [(playlist_default, media_entries[0]), (playlist_work, media_entries[1])]:
            db.add(
                PlaylistItem(
                    playlist_id=playlist.id,
                    media_id=media.id,
                    media_url=media.url,
                    media_type=media.type,
                    duration_sec=10,
                    sort_order=1,
                )
            )
        db.commit()

        screen = Screen(
            owner_account=SEED_ACCOUNT,
            name="Lobby Screen",
            group_id=group.id,
            default_playlist_id=playlist_default.id,
            screen_token=generate_screen_token(),
            paired=True,
        )
        db.add(screen)
        db.commit()

        db.add(
            Schedule(
                owner_account=SEED_ACCOUNT,
                name="Weekdays 09-17",
                group_id=group.id,
                playlist_id=playlist_work.id,
                days=json.dumps([1, 2, 3, 4, 5]),
                start_time="09:00",
                end_time="17:00",
                priority=0,
            )
        )
        db.commit()
        print(f"Seeded screen token: {screen.screen_token}")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
