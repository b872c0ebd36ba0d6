import os
import pytest
from moto import mock_aws
from fastapi.testclient import TestClient
import boto3

# Set test environment variables BEFORE importing app modules
# Dummy AWS credentials for moto
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
os.environ["AWS_SECURITY_TOKEN"] = "testing"
os.environ["AWS_SESSION_TOKEN"] = "testing"
os.environ["AWS_REGION"] = "us-east-1"
os.environ["S3_BUCKET"] = "doggy-delights-test"
# Clear endpoints so moto mocks are used instead of localstack
os.environ.pop("AWS_ENDPOINT_URL", None)
os.environ.pop("PUBLIC_BASE_URL", None)

from doggy_delights.main import app
from doggy_delights.storage.s3 import S3Service

BUCKET = "doggy-delights-test"


@pytest.fixture(scope="function")
def aws_credentials():
    """Mocked AWS Credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"


@pytest.fixture(scope="function")
def s3_service(aws_credentials):
    with mock_aws():
        s3 = boto3.client("s3", region_name="us-east-1")
        s3.create_bucket(Bucket=BUCKET)
        yield S3Service()


@pytest.fixture(scope="function")
def asgi_app(s3_service):
    """The app wired to the mocked store, for clients that skip the lifespan."""
    app.state.s3 = s3_service
    return app


@pytest.fixture(scope="function")
def test_client(s3_service):
    with TestClient(app) as client:
        # Replace the lifespan's service with the one tests can inspect
        app.state.s3 = s3_service
        yield client
