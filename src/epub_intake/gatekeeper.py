"""Method check and shared-secret authentication for uploads."""
import hmac

from epub_intake.errors import AuthError, MethodError


def authorize_upload(request, settings):
    """Reject non-POST requests and requests without the right api key.

    Only the method and query string are inspected, so a rejected request
    never has its body read.
    """
    if request.method != 'POST':
        raise MethodError()

    supplied = request.args.get(settings.api_key_param, '')
    if not hmac.compare_digest(supplied.encode('utf-8'), settings.api_key.encode('utf-8')):
        raise AuthError()
