"""Default configuration values."""

DEFAULT_CONFIG = {
    "retry": {
        "max_attempts": 5,
        "fatal_patterns": ["*fatal*"],
        "match_mode": "glob",
    },
    "cache": {
        "journal_dir": ".transfer_jobs",
        "persist": True,
    },
    "file_ops": {
        "max_retries": 3,
        "backoff_base_sec": 0.5,
        "backoff_cap_sec": 10.0,
    },
    "local_photos": {
        "album_page_size": 20,
        "photo_page_size": 50,
        "image_extensions": [
            ".jpg",
            ".jpeg",
            ".png",
            ".gif",
            ".bmp",
            ".tif",
            ".tiff",
            ".webp",
            ".heic",
            ".heif",
        ],
    },
    "logging": {
        "level": "INFO",
        "log_file": None,
    },
}
