import logging
from pathlib import Path
from typing import Optional

import firebase_admin
from firebase_admin import credentials

logger = logging.getLogger(__name__)


def init_firebase(credentials_path: Optional[str] = None, name: str = "[DEFAULT]"):
    """Initialise (or reuse) the Firebase Admin app.

    Uses the service account file at ``credentials_path`` when given, otherwise
    application default credentials. Returns None when no credentials could be
    loaded; push sends then fail with a gateway error instead of crashing startup.
    """
    try:
        return firebase_admin.get_app(name)
    except ValueError:
        pass

    try:
        if credentials_path:
            path = Path(credentials_path)
            if not path.exists():
                logger.warning(f"⚠️ Firebase service account file not found at {path}")
                return None
            cred = credentials.Certificate(str(path))
        else:
            cred = credentials.ApplicationDefault()
        app = firebase_admin.initialize_app(cred, name=name)
    except Exception as e:
        logger.error(f"❌ Error initializing Firebase: {e}")
        return None

    logger.info("✅ Firebase Admin SDK initialized successfully")
    return app
