"""Photo upload storage and validation."""
import pytest

from refinish_tool.errors import UploadRejectedError
from refinish_tool.services.upload_service import (
    MAX_FILE_SIZE, validate_file, validate_file_count,
)

JPEG = b'\xff\xd8\xff\xe0' + b'0' * 64
PNG = b'\x89PNG\r\n\x1a\n' + b'0' * 64


def test_save_and_open(upload_service):
    record = upload_service.save('Club Face.PNG', 'image/png', PNG)

    assert record.r2_key.startswith('uploads/')
    assert record.r2_key.endswith('.png')
    assert record.original_filename == 'Club Face.PNG'
    assert record.size_bytes == len(PNG)

    data, content_type = upload_service.open(record.r2_key)
    assert data == PNG
    assert content_type == 'image/png'


def test_extension_defaults_to_jpg(upload_service):
    record = upload_service.save('photo', 'image/jpeg', JPEG)
    assert record.r2_key.endswith('.jpg')


def test_keys_are_unique(upload_service):
    keys = {upload_service.save('a.jpg', 'image/jpeg', JPEG).r2_key for _ in range(5)}
    assert len(keys) == 5


def test_rejects_wrong_type(upload_service):
    with pytest.raises(UploadRejectedError, match='Invalid file type: doc.pdf'):
        upload_service.save('doc.pdf', 'application/pdf', b'%PDF')


def test_rejects_large_file(upload_service):
    with pytest.raises(UploadRejectedError, match='File too large'):
        upload_service.save('big.jpg', 'image/jpeg', b'0' * (MAX_FILE_SIZE + 1))


def test_batch_count_limits(upload_service):
    with pytest.raises(UploadRejectedError, match='No files provided'):
        upload_service.save_batch([])
    with pytest.raises(UploadRejectedError, match='at least 2 photos'):
        upload_service.save_batch([('a.jpg', 'image/jpeg', JPEG)])
    with pytest.raises(UploadRejectedError, match='Maximum 10 photos'):
        upload_service.save_batch([('a.jpg', 'image/jpeg', JPEG)] * 11)


def test_batch_writes_nothing_when_one_file_is_bad(upload_service):
    with pytest.raises(UploadRejectedError):
        upload_service.save_batch([('a.jpg', 'image/jpeg', JPEG), ('b.gif', 'image/gif', b'GIF89a')])
    uploads_dir = upload_service.upload_dir / 'uploads'
    assert not uploads_dir.exists() or not any(uploads_dir.iterdir())


def test_open_missing_or_escaping_keys(upload_service, tmp_path):
    (tmp_path / 'secret.txt').write_text('nope')

    assert upload_service.open('uploads/missing.jpg') is None
    assert upload_service.open('../secret.txt') is None
    assert upload_service.open('') is None


def test_validators():
    assert validate_file('image/webp', 1024) is None
    assert validate_file('image/gif', 1024) == 'Only JPEG, PNG, and WebP images are allowed'
    assert validate_file('image/jpeg', MAX_FILE_SIZE + 1) == 'File must be under 10MB'
    assert validate_file_count(2) is None
    assert validate_file_count(10) is None
    assert validate_file_count(1) == 'Please upload at least 2 photos'


def test_batch_messages_name_the_rejected_file(upload_service):
    with pytest.raises(UploadRejectedError, match='File too large: big.jpg'):
        upload_service.save_batch([('a.jpg', 'image/jpeg', JPEG), ('big.jpg', 'image/jpeg', b'0' * (MAX_FILE_SIZE + 1))])
    with pytest.raises(UploadRejectedError, match='Invalid file type: b.gif'):
        upload_service.save_batch([('a.jpg', 'image/jpeg', JPEG), ('b.gif', 'image/gif', b'GIF89a')])
