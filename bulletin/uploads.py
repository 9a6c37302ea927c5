# Standard library imports
import os
import random
import re
import shutil
import time
from contextlib import contextmanager

# Third-party imports
from flask import current_app
from werkzeug.utils import secure_filename
from wtforms.validators import ValidationError

# Local application imports
from bulletin.audit import audit_log_file_operation


def get_file_extension(filename):
    """Lower-cased extension without the dot, or '' when there is none."""
    if not filename or '.' not in filename:
        return ''
    return filename.rsplit('.', 1)[1].lower()


def allowed_image_file(filename):
    """
    Check whether a filename carries an allowed image extension.

    Args:
        filename (str): The original client filename.

    Returns:
        bool: True for jpg, jpeg, png and gif.
    """
    allowed = current_app.config.get('IMAGE_ALLOWED_EXTENSIONS', ['jpg', 'jpeg', 'png', 'gif'])
    return get_file_extension(filename) in allowed


def allowed_image_mimetype(mimetype):
    """Check whether a declared MIME type is an allowed image type."""
    allowed = current_app.config.get('IMAGE_ALLOWED_MIMETYPES',
                                     ['image/jpeg', 'image/png', 'image/gif'])
    return (mimetype or '').lower() in allowed


def get_upload_size(file_storage):
    """Size of an uploaded file in bytes, leaving the stream at the start."""
    stream = file_storage.stream
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def max_image_bytes():
    return current_app.config.get('IMAGE_MAX_SIZE_MB', 5) * 1024 * 1024


def has_upload(file_storage):
    return file_storage is not None and bool(getattr(file_storage, 'filename', None))


def validate_image_upload(file_storage):
    """
    Validate an uploaded event image.

    Both the declared MIME type and the file extension must be on the
    allow-list, and the file may not exceed the configured size.

    Args:
        file_storage: werkzeug FileStorage, or None when nothing was uploaded.

    Returns:
        list: Error messages; empty when the upload is acceptable or absent.
    """
    if not has_upload(file_storage):
        return []

    errors = []
    if not (allowed_image_file(file_storage.filename)
            and allowed_image_mimetype(file_storage.mimetype)):
        errors.append('Only image files (jpeg, jpg, png, gif) are allowed!')

    if get_upload_size(file_storage) > max_image_bytes():
        errors.append(
            f'Image is too large. Maximum size is {current_app.config.get("IMAGE_MAX_SIZE_MB", 5)}MB.')

    return errors


class ImageUpload:
    """
    WTForms validator applying ``validate_image_upload`` to a file field.
    """
    def __call__(self, form, field):
        errors = validate_image_upload(field.data)
        if errors:
            raise ValidationError(errors[0])


def generate_image_filename(original_filename):
    """
    Build a collision-resistant stored filename from the client's filename.

    The sanitized base name is kept for readability and suffixed with the
    current time in milliseconds and a random integer.

    Args:
        original_filename (str): Filename as sent by the client.

    Returns:
        str: e.g. ``poster-1731000000000-483920184.png``
    """
    extension = get_file_extension(original_filename)
    base = original_filename.rsplit('.', 1)[0] if '.' in original_filename else original_filename
    base = secure_filename(base) or 'image'
    base = re.sub(r'[^\w\-]', '_', base)[:64]
    unique_suffix = f'{int(time.time() * 1000)}-{random.randint(0, 10**9)}'
    filename = f'{base}-{unique_suffix}'
    if extension:
        filename += f'.{extension}'
    return filename


def public_image_path(filename):
    """Relative public path stored on the event row."""
    prefix = current_app.config.get('UPLOAD_URL_PREFIX', '/uploads/events').rstrip('/')
    return f'{prefix}/{filename}'


def resolve_image_path(image_path):
    """
    Map a stored public image path to its file in the upload folder.

    Returns:
        str: Absolute path, or None when the reference does not point inside
        the upload folder.
    """
    if not image_path:
        return None

    prefix = current_app.config.get('UPLOAD_URL_PREFIX', '/uploads/events').rstrip('/') + '/'
    if not image_path.startswith(prefix):
        return None

    filename = image_path[len(prefix):]
    if not filename or '..' in filename or '/' in filename or '\\' in filename:
        return None

    base_path = os.path.normpath(current_app.config['UPLOAD_FOLDER'])
    full_path = os.path.normpath(os.path.join(base_path, filename))
    if os.path.dirname(full_path) != base_path:
        return None
    return full_path


def save_event_image(file_storage):
    """
    Store an uploaded image in the upload folder.

    Returns:
        str: The public relative path to record on the event or submission.
    """
    upload_folder = current_app.config['UPLOAD_FOLDER']
    os.makedirs(upload_folder, exist_ok=True)

    filename = generate_image_filename(file_storage.filename)
    file_storage.save(os.path.join(upload_folder, filename))

    current_app.logger.info(f"Stored event image {filename}")
    audit_log_file_operation('UPLOAD', filename, f'Stored image from {file_storage.filename}')
    return public_image_path(filename)


def copy_event_image(image_path):
    """
    Store a copy of an existing image under a new name.

    An approved submission hands its image to the published event as a
    separate file, so each row owns the file it points to.

    Returns:
        str: The public path of the copy, or None when the source is missing
        or outside the upload folder.
    """
    source = resolve_image_path(image_path)
    if source is None or not os.path.exists(source):
        if image_path:
            current_app.logger.warning(f"Image to copy not found: {image_path}")
        return None

    filename = generate_image_filename(os.path.basename(source))
    shutil.copyfile(source, os.path.join(os.path.dirname(source), filename))

    audit_log_file_operation('COPY', filename, f'Copied image {os.path.basename(source)}')
    return public_image_path(filename)


def delete_event_image(image_path):
    """
    Remove a stored image file if it exists.

    Returns:
        bool: True when a file was removed.
    """
    full_path = resolve_image_path(image_path)
    if full_path is None:
        if image_path:
            current_app.logger.warning(f"Refusing to delete image outside upload folder: {image_path}")
        return False

    if not os.path.exists(full_path):
        return False

    try:
        os.remove(full_path)
    except OSError as e:
        current_app.logger.error(f"Could not delete image {full_path}: {str(e)}")
        return False

    audit_log_file_operation('DELETE', os.path.basename(full_path), 'Removed stored image')
    return True


@contextmanager
def staged_image(file_storage):
    """
    Store an upload for the duration of a block, removing it if the block fails.

    Yields the public image path, or None when nothing was uploaded.
    """
    image_path = save_event_image(file_storage) if has_upload(file_storage) else None
    try:
        yield image_path
    except Exception:
        if image_path:
            delete_event_image(image_path)
        raise
