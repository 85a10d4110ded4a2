"""Pytest configuration for integration tests"""
import os
import sys
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Load environment variables from .env if it exists
env_file = project_root / 'tests' / '.env'
if env_file.exists():
    load_dotenv(env_file)


@pytest.fixture(scope="session")
def aws_region():
    """Get AWS region from environment"""
    return os.environ.get('AWS_REGION', 'ap-northeast-1')


@pytest.fixture(scope="class")
def aws_resources(aws_region):
    """Setup AWS resources for integration testing

    This fixture provides AWS clients and resource information
    needed for integration tests.
    """
    import boto3

    # Get resource names from environment or Terraform outputs
    table_name = os.environ.get('USERS_TABLE_NAME')
    lambda_function_name = os.environ.get('LAMBDA_FUNCTION_NAME')
    channel_secret = os.environ.get('TEST_LINE_CHANNEL_SECRET')

    if not table_name or not lambda_function_name or not channel_secret:
        pytest.skip(
            "AWS resources not configured. Please set environment variables:\n"
            "  USERS_TABLE_NAME, LAMBDA_FUNCTION_NAME, TEST_LINE_CHANNEL_SECRET"
        )

    try:
        boto3.client('sts', region_name=aws_region).get_caller_identity()
    except Exception as e:
        pytest.skip(f"AWS credentials not configured: {e}")

    dynamodb = boto3.resource('dynamodb', region_name=aws_region)

    return {
        'lambda_client': boto3.client('lambda', region_name=aws_region),
        'lambda_function_name': lambda_function_name,
        'channel_secret': channel_secret,
        'table': dynamodb.Table(table_name)
    }
