"""Lambda handler for the media repository using Mangum."""
from mangum import Mangum

from media_repo.config.settings import get_settings
from media_repo.main import create_app

# Lambda has no writable disk worth keeping; deploy with STORAGE_BACKEND=s3
app = create_app(get_settings())

# Wrap with Mangum for Lambda compatibility
handler = Mangum(app, lifespan="off")
