from functools import lru_cache
import os
import uuid

from azure.storage.blob import BlobServiceClient

from config import AZURE_STORAGE_ACCOUNT, AZURE_STORAGE_KEY


@lru_cache(maxsize=1)
def get_blob_service() -> BlobServiceClient:
     """Created on first use so the app imports without storage credentials."""
     return BlobServiceClient.from_connection_string(
          f"DefaultEndpointsProtocol=https;"
          f"AccountName={AZURE_STORAGE_ACCOUNT};"
          f"AccountKey={AZURE_STORAGE_KEY};"
          f"EndpointSuffix=core.windows.net"
     )


def upload_to_blob(file, container: str, owner_key: str | int) -> tuple[str, str]:
     """
     Upload an UploadFile and return (url, blob_name).

     Blobs are namespaced by `owner_key` (the uploader's id).
     """
     ext = os.path.splitext(file.filename or "")[1]
     blob_name = f"{owner_key}/{uuid.uuid4()}{ext}"
     blob_client = get_blob_service().get_blob_client(container=container, blob=blob_name)
     blob_client.upload_blob(file.file, overwrite=True)
     return f"https://{AZURE_STORAGE_ACCOUNT}.blob.core.windows.net/{container}/{blob_name}", blob_name


def delete_from_blob(container: str, blob_name: str):
     """
     Deletes a file from Azure Blob Storage
     """
     blob_client = get_blob_service().get_blob_client(
          container=container,
          blob=blob_name
     )
     blob_client.delete_blob()
