"""
Copyright (c) 2023 TextRazor, https://www.textrazor.com/

Permission is hereby granted, free of charge, to any person obtaining
a copy of this software and associated documentation files (the "Software"),
to deal in the Software without restriction, including without limitation
the rights to use, copy, modify, merge, publish, distribute, sublicense,
and/or sell copies of the Software, and to permit persons to whom the Software
is furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in
 all copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN
THE SOFTWARE.

"""

import gzip
import json
import logging
import os
import warnings
import zlib
from functools import partial
from http.client import HTTPConnection, HTTPException, HTTPSConnection
from urllib.error import HTTPError, URLError
from urllib.parse import quote, quote_plus, urlencode
from urllib.request import HTTPHandler, HTTPRedirectHandler, HTTPSHandler, Request, build_opener

log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

# Endpoints aren't usually changed by an end user, but helpful to
# have as an option for debug purposes.

_SECURE_TEXTRAZOR_ENDPOINT = "https://api.textrazor.com/"
_TEXTRAZOR_ENDPOINT = "http://api.textrazor.com/"

# TextRazor stops processing a document after 30 seconds, these only bound the transport.
_DEFAULT_CONNECT_TIMEOUT_SECONDS = 120
_DEFAULT_TIMEOUT_SECONDS = 120

_FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
_JSON_CONTENT_TYPE = "application/json"
_CSV_CONTENT_TYPE = "application/csv"

_TRUE_STRINGS = ("1", "true", "yes", "on")
_FALSE_STRINGS = ("0", "false", "no", "off")


class TextRazorAnalysisException(Exception):
    pass


class ValidationError(TextRazorAnalysisException):
    """Raised when an argument has the wrong type or is missing. Nothing has been sent to TextRazor."""


class TransportError(TextRazorAnalysisException):
    """Raised when the request failed below the HTTP layer, for example a DNS failure,
    a TLS error, a timeout or a reset connection. It is safe to retry the call.

    ``reason`` holds the underlying error, ``errno`` its OS error code where there is one.
    """

    def __init__(self, message, reason=None):
        super(TransportError, self).__init__(message)
        self.reason = reason
        self.errno = getattr(reason, "errno", None)


class ServiceError(TextRazorAnalysisException):
    """Raised when TextRazor answered with anything other than HTTP 200, or with a
    200 whose body couldn't be decoded. ``body`` is the raw response text."""

    def __init__(self, status_code, body, message=None):
        if message is None:
            message = "TextRazor returned HTTP Code %d: %s" % (status_code, body)

        super(ServiceError, self).__init__(message)
        self.status_code = status_code
        self.body = body


def _check_string(value, name):
    if not isinstance(value, str):
        raise ValidationError("%s must be a string" % name)
    return value


def _check_bool(value, name):
    if not isinstance(value, bool):
        raise ValidationError("%s must be a bool" % name)
    return value


def _check_string_list(value, name):
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        raise ValidationError("%s must be a list of strings" % name)
    return list(value)


def _check_seconds(value, name):
    if value is None:
        return value

    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise ValidationError("%s must be a non-negative number of seconds, or None" % name)
    return value


def _check_optional_string(value, name):
    if value is None:
        return value
    return _check_string(value, name)


def _check_id(value, message):
    if not isinstance(value, str) or not value:
        raise ValidationError(message)
    return value


def _check_non_empty_list(value, type_message, empty_message):
    if not isinstance(value, (list, tuple)):
        raise ValidationError(type_message)

    if not value:
        raise ValidationError(empty_message)
    return list(value)


def _quote_id(value):
    # Identifiers are a single path segment, so '/' must be escaped too.
    return quote(value, safe="")


def _paging_suffix(limit, offset):
    params = []
    if limit is not None:
        params.append(("limit", limit))
    if offset is not None:
        params.append(("offset", offset))

    if not params:
        return ""
    return "?" + urlencode(params)


class TextRazorQueryBuilder(object):
    """Builds the form encoded body of an analysis request.

    urlencode has its own ideas about how to serialize lists and booleans, TextRazor
    expects a list as the same key repeated once per item, and booleans as the literal
    strings "true" and "false".

    >>> builder = TextRazorQueryBuilder()
    >>> builder.add("extractors", ["entities", "words"])
    >>> builder.add("cleanup.returnRaw", True)
    >>> builder.build()
    'extractors=entities&extractors=words&cleanup.returnRaw=true'
    """

    def __init__(self):
        self._params = []

    def add(self, key, value):
        """Appends value under key. None is skipped, lists and tuples are flattened in order."""
        if value is None:
            return

        if isinstance(value, (list, tuple)):
            for item in value:
                self.add(key, item)
        elif isinstance(value, bool):
            self._params.append((key, "true" if value else "false"))
        elif isinstance(value, (str, bytes)):
            self._params.append((key, value))
        elif isinstance(value, (int, float)):
            self._params.append((key, str(value)))
        else:
            raise ValidationError("Cannot encode TextRazor param %s with value of type %s" % (key, type(value).__name__))

    def pairs(self):
        """Returns a copy of the (key, value) pairs added so far, before encoding."""
        return list(self._params)

    def build(self):
        return "&".join("=".join([quote_plus(key), quote_plus(value)]) for key, value in self._params)

    def __len__(self):
        return len(self._params)


class checked_setting(object):
    """ Settings attribute that runs its check on every assignment, so a bad value
    fails where it is set rather than when a request is sent. """

    def __init__(self, attr_name, check):
        self.attr_name = attr_name
        self.check = check

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return instance.__dict__[self.attr_name]

    def __set__(self, instance, value):
        instance.__dict__[self.attr_name] = self.check(value, self.attr_name)


class TextRazorSettings(object):
    """Connection defaults shared by every TextRazor client you create with it.

    Each connection copies these values when it is constructed, so later changes here
    only affect connections created afterwards.

    >>> import textrazor
    >>> settings = textrazor.TextRazorSettings(api_key="YOUR_API_KEY_HERE", do_compression=False)
    >>> client = textrazor.TextRazor(extractors=["entities"], settings=settings)
    >>> account_manager = textrazor.AccountManager(settings=settings)
    """

    def __init__(self, api_key=None, endpoint=_TEXTRAZOR_ENDPOINT, secure_endpoint=_SECURE_TEXTRAZOR_ENDPOINT,
                 do_encryption=True, do_compression=True,
                 connect_timeout_seconds=_DEFAULT_CONNECT_TIMEOUT_SECONDS, timeout_seconds=_DEFAULT_TIMEOUT_SECONDS):
        self.api_key = api_key
        self.endpoint = endpoint
        self.secure_endpoint = secure_endpoint
        self.do_encryption = do_encryption
        self.do_compression = do_compression
        self.connect_timeout_seconds = connect_timeout_seconds
        self.timeout_seconds = timeout_seconds

    api_key = checked_setting("api_key", _check_optional_string)
    endpoint = checked_setting("endpoint", _check_string)
    secure_endpoint = checked_setting("secure_endpoint", _check_string)
    do_encryption = checked_setting("do_encryption", _check_bool)
    do_compression = checked_setting("do_compression", _check_bool)
    connect_timeout_seconds = checked_setting("connect_timeout_seconds", _check_seconds)
    timeout_seconds = checked_setting("timeout_seconds", _check_seconds)

    @classmethod
    def from_environ(cls, environ=None):
        """Creates settings from TEXTRAZOR_* environment variables, falling back to the defaults
        for anything that isn't set.

        Recognised variables are TEXTRAZOR_API_KEY, TEXTRAZOR_ENDPOINT, TEXTRAZOR_SECURE_ENDPOINT,
        TEXTRAZOR_DO_ENCRYPTION, TEXTRAZOR_DO_COMPRESSION, TEXTRAZOR_CONNECT_TIMEOUT and TEXTRAZOR_TIMEOUT.
        """
        if environ is None:
            environ = os.environ

        options = {}

        for option, variable in (("api_key", "TEXTRAZOR_API_KEY"),
                                 ("endpoint", "TEXTRAZOR_ENDPOINT"),
                                 ("secure_endpoint", "TEXTRAZOR_SECURE_ENDPOINT")):
            if variable in environ:
                options[option] = environ[variable]

        for option, variable in (("do_encryption", "TEXTRAZOR_DO_ENCRYPTION"),
                                 ("do_compression", "TEXTRAZOR_DO_COMPRESSION")):
            if variable in environ:
                options[option] = _parse_bool(variable, environ[variable])

        for option, variable in (("connect_timeout_seconds", "TEXTRAZOR_CONNECT_TIMEOUT"),
                                 ("timeout_seconds", "TEXTRAZOR_TIMEOUT")):
            if variable in environ:
                options[option] = _parse_seconds(variable, environ[variable])

        return cls(**options)


def _parse_bool(name, raw):
    lowered = raw.strip().lower()
    if lowered in _TRUE_STRINGS:
        return True
    if lowered in _FALSE_STRINGS:
        return False
    raise ValidationError("%s must be one of %s, got %r" % (name, "/".join(_TRUE_STRINGS + _FALSE_STRINGS), raw))


def _parse_seconds(name, raw):
    try:
        seconds = float(raw)
    except ValueError:
        raise ValidationError("%s must be a number of seconds, got %r" % (name, raw))

    return _check_seconds(seconds, name)


class _ConnectTimeoutMixin(object):
    """http.client uses a single timeout for connecting and reading. This applies
    connect_timeout while connecting (including any TLS handshake), then switches the
    socket over to the regular timeout for reads."""

    def __init__(self, *args, **kwargs):
        self.connect_timeout = kwargs.pop("connect_timeout", None)
        super(_ConnectTimeoutMixin, self).__init__(*args, **kwargs)

    def connect(self):
        read_timeout = self.timeout
        self.timeout = self.connect_timeout

        try:
            super(_ConnectTimeoutMixin, self).connect()
        finally:
            self.timeout = read_timeout

        self.sock.settimeout(read_timeout)


class _TimeoutHTTPConnection(_ConnectTimeoutMixin, HTTPConnection):
    pass


class _TimeoutHTTPSConnection(_ConnectTimeoutMixin, HTTPSConnection):
    pass


class _TimeoutHTTPHandler(HTTPHandler):

    def __init__(self, connect_timeout):
        super(_TimeoutHTTPHandler, self).__init__()
        self.connect_timeout = connect_timeout

    def http_open(self, req):
        return self.do_open(partial(_TimeoutHTTPConnection, connect_timeout=self.connect_timeout), req)


class _TimeoutHTTPSHandler(HTTPSHandler):

    def __init__(self, connect_timeout):
        super(_TimeoutHTTPSHandler, self).__init__()
        self.connect_timeout = connect_timeout

    def https_open(self, req):
        return self.do_open(partial(_TimeoutHTTPSConnection, connect_timeout=self.connect_timeout), req,
                            context=self._context)


class _NoRedirectHandler(HTTPRedirectHandler):
    """Leaves 3xx replies to surface as HTTPError, so each call is exactly one request."""

    def redirect_request(self, req, fp, code, msg, headers, newurl):
        return None


def _decompress(headers, data):
    content_encoding = (headers.get("Content-Encoding") or "").strip().lower()

    if content_encoding == "gzip":
        return gzip.decompress(data)

    if content_encoding == "deflate":
        try:
            return zlib.decompress(data)
        except zlib.error:
            # Some servers send a raw deflate stream without the zlib wrapper.
            return zlib.decompress(data, -zlib.MAX_WBITS)

    return data


class TextRazorConnection(object):
    """Shared transport for all TextRazor calls.

    Settings are copied from ``settings`` (or the built in defaults) at construction, and
    ``api_key``, ``do_compression`` and ``do_encryption`` override them for this instance only.
    """

    def __init__(self, api_key=None, do_compression=None, do_encryption=None, settings=None):
        if settings is None:
            settings = TextRazorSettings()

        self.api_key = settings.api_key
        self.set_endpoint(settings.endpoint)
        self.set_secure_endpoint(settings.secure_endpoint)
        self.set_do_compression(settings.do_compression)
        self.set_do_encryption(settings.do_encryption)
        self.set_connect_timeout_seconds(settings.connect_timeout_seconds)
        self.set_timeout_seconds(settings.timeout_seconds)

        if api_key is not None:
            self.set_api_key(api_key)
        if do_compression is not None:
            self.set_do_compression(do_compression)
        if do_encryption is not None:
            self.set_do_encryption(do_encryption)

        if not isinstance(self.api_key, str):
            raise ValidationError("A TextRazor API key is required, either directly or through TextRazorSettings.")

    def set_api_key(self, api_key):
        """Sets the TextRazor API key, required for all requests."""
        self.api_key = _check_string(api_key, "api_key")

    def set_do_compression(self, do_compression):
        """When True, request gzipped responses from TextRazor.  When expecting a large response this can
        significantly reduce bandwidth.  Defaults to True."""
        self.do_compression = _check_bool(do_compression, "do_compression")

    def set_do_encryption(self, do_encryption):
        """When True, all communication to TextRazor will be sent over SSL, when handling sensitive
        or private information this should be set to True.  Defaults to True."""
        self.do_encryption = _check_bool(do_encryption, "do_encryption")

    def set_endpoint(self, endpoint):
        self.endpoint = _check_string(endpoint, "endpoint")

    def set_secure_endpoint(self, endpoint):
        self.secure_endpoint = _check_string(endpoint, "secure_endpoint")

    def set_connect_timeout_seconds(self, connect_timeout_seconds):
        """Sets how long to wait for a connection (and TLS handshake) to TextRazor, 0 or None to wait forever.

        This does not interrupt TextRazor's own analysis, which times out after 30 seconds."""
        self.connect_timeout_seconds = _check_seconds(connect_timeout_seconds, "connect_timeout_seconds")

    def set_timeout_seconds(self, timeout_seconds):
        """Sets how long to wait on each read from TextRazor once connected, 0 or None to wait forever."""
        self.timeout_seconds = _check_seconds(timeout_seconds, "timeout_seconds")

    def _build_request_headers(self):
        request_headers = {
            'X-TextRazor-Key': self.api_key.strip()
        }

        if self.do_compression:
            request_headers['Accept-Encoding'] = 'gzip, deflate'

        return request_headers

    def _build_url(self, path):
        if self.do_encryption:
            endpoint = self.secure_endpoint
        else:
            endpoint = self.endpoint

        return "".join([endpoint, path])

    def _open(self, request):
        opener = build_opener(_TimeoutHTTPHandler(self.connect_timeout_seconds or None),
                              _TimeoutHTTPSHandler(self.connect_timeout_seconds or None),
                              _NoRedirectHandler())

        return opener.open(request, timeout=self.timeout_seconds or None)

    def do_request(self, path, body=None, content_type=None, method="GET"):
        """Sends a single request to TextRazor and returns the decoded JSON response.

        Raises :class:`TransportError` if TextRazor couldn't be reached, and :class:`ServiceError`
        if it replied with anything other than a valid HTTP 200 JSON response."""

        encoded_body = body
        if isinstance(body, str):
            encoded_body = body.encode("utf-8")

        request_headers = self._build_request_headers()

        if content_type:
            request_headers['Content-Type'] = content_type

        url = self._build_url(path)
        request = Request(url, data=encoded_body, headers=request_headers, method=method)

        log.debug("Sending TextRazor request: %s %s", method, url)

        try:
            response = self._open(request)
        except HTTPError as e:
            error_body = self._read_error_body(e)
            log.debug("TextRazor returned HTTP %d for %s %s", e.code, method, url)
            raise ServiceError(e.code, error_body)
        except URLError as e:
            raise TransportError("Network problem connecting to TextRazor: %s" % e.reason, e.reason)
        except (HTTPException, OSError) as e:
            raise TransportError("Network problem connecting to TextRazor: %r" % e, e)

        with response:
            status = response.status

            try:
                raw_body = response.read()
            except (HTTPException, OSError) as e:
                raise TransportError("Network problem reading the TextRazor response: %r" % e, e)

            headers = response.headers

        log.debug("TextRazor returned HTTP %d for %s %s", status, method, url)

        try:
            response_text = _decompress(headers, raw_body).decode("utf-8")
        except (OSError, EOFError, zlib.error, UnicodeDecodeError) as e:
            raise ServiceError(status, raw_body.decode("utf-8", "replace"),
                               "TextRazor returned a response that couldn't be decoded: %s" % e)

        if status != 200:
            raise ServiceError(status, response_text)

        try:
            return json.loads(response_text)
        except ValueError as e:
            raise ServiceError(status, response_text, "TextRazor returned invalid JSON: %s" % e)

    def _read_error_body(self, error):
        try:
            raw_body = error.read()
        except (HTTPException, OSError):
            return ""

        try:
            raw_body = _decompress(error.headers, raw_body)
        except (OSError, EOFError, zlib.error):
            pass

        return raw_body.decode("utf-8", "replace")


class DictionaryManager(TextRazorConnection):
    """Manages custom entity dictionaries stored in your TextRazor account.

    All methods return the decoded TextRazor response.

    >>> import textrazor
    >>> dictionary_manager = textrazor.DictionaryManager("YOUR_API_KEY_HERE")
    >>>
    >>> dictionary_manager.create_dictionary("UNIQUE_ID", match_type="token")
    >>> dictionary_manager.add_entries("UNIQUE_ID", [{'text': 'test text to match', 'id': 'UNIQUE_ENTRY_ID'}])
    """

    path = "entities/"

    def __init__(self, api_key=None, settings=None):
        super(DictionaryManager, self).__init__(api_key, settings=settings)

    def _dictionary_path(self, dictionary_id, *rest):
        _check_id(dictionary_id, "Custom Entity Dictionaries must have an ID.")
        return "".join([self.path, _quote_id(dictionary_id)] + list(rest))

    def _entry_path(self, dictionary_id, entry_id, action):
        _check_id(entry_id, "Custom Entity Dictionary Entries can only be %s by ID." % action)
        return self._dictionary_path(dictionary_id, "/", _quote_id(entry_id))

    def create_dictionary(self, dictionary_id, match_type=None, case_insensitive=None, language=None):
        """ Creates a new dictionary with id dictionary_id, replacing any existing dictionary with that id.

        match_type  - "stem" splits and stems words before matching, "token" splits and matches literally.
                      Defaults to "token".
        case_insensitive - When True, this dictionary will match both uppercase and lowercase characters.
        language    - An ISO-639-2 language code restricting matches to documents of that language,
                      or "any". Defaults to "any".
        """
        dictionary_path = self._dictionary_path(dictionary_id)

        dictionary_properties = {}

        if match_type is not None:
            dictionary_properties["matchType"] = _check_string(match_type, "match_type")
        if case_insensitive is not None:
            dictionary_properties["caseInsensitive"] = _check_bool(case_insensitive, "case_insensitive")
        if language is not None:
            dictionary_properties["language"] = _check_string(language, "language")

        return self.do_request(dictionary_path, json.dumps(dictionary_properties),
                               content_type=_JSON_CONTENT_TYPE, method="PUT")

    def all_dictionaries(self):
        """ Returns all dictionaries in your account.

        >>> for dictionary in dictionary_manager.all_dictionaries()["dictionaries"]:
        >>>     print(dictionary["id"])
        """
        return self.do_request(self.path, method="GET")

    def get_dictionary(self, dictionary_id):
        return self.do_request(self._dictionary_path(dictionary_id), method="GET")

    def delete_dictionary(self, dictionary_id):
        """ Deletes a dictionary and all its entries by id. """
        return self.do_request(self._dictionary_path(dictionary_id), method="DELETE")

    def all_entries(self, dictionary_id, limit=None, offset=None):
        """ Returns entries for the dictionary with id dictionary_id, along with paging information.

        Larger dictionaries can be too large to download all at once. Where possible it is recommended that you use
        limit and offset paramaters to control the TextRazor response, rather than filtering client side.

        >>> entry_response = dictionary_manager.all_entries("UNIQUE_ID", limit=10, offset=10)
        >>> for entry in entry_response["response"]["entries"]:
        >>>     print(entry["text"])
        """
        all_path = self._dictionary_path(dictionary_id, "/_all", _paging_suffix(limit, offset))
        return self.do_request(all_path, method="GET")

    def add_entries(self, dictionary_id, entries):
        """ Adds entries to a dictionary with id dictionary_id.

        Entries must be a List of dicts corresponding to properties of the new entries.
        At a minimum this would be [{'text':'test text to match'}].

        >>> dictionary_manager.add_entries("UNIQUE_ID", [{'text':'test text to match'}, {'text':'more text to match', 'id':'UNIQUE_ENTRY_ID'}])
        """
        dictionary_path = self._dictionary_path(dictionary_id, "/")

        entries = _check_non_empty_list(
            entries,
            "Entries must be a List of dicts corresponding to properties of the new dictionary entries.",
            "List of new entries cannot be empty.")

        return self.do_request(dictionary_path, json.dumps(entries), content_type=_JSON_CONTENT_TYPE, method="POST")

    def get_entry(self, dictionary_id, entry_id):
        """ Retrieves a specific entry by dictionary id and entry id.

        >>> print(dictionary_manager.get_entry('UNIQUE_ID', 'UNIQUE_ENTRY_ID')["response"]["text"])
        """
        return self.do_request(self._entry_path(dictionary_id, entry_id, "retrieved"), method="GET")

    def delete_entry(self, dictionary_id, entry_id):
        """Deletes a specific entry by dictionary id and entry id.

        For performance reasons it's always faster to perform major changes
        to dictionaries by deleting and recreating the whole dictionary rather than removing
        many individual entries.
        """
        return self.do_request(self._entry_path(dictionary_id, entry_id, "deleted"), method="DELETE")


class ClassifierManager(TextRazorConnection):

    path = "categories/"

    def __init__(self, api_key=None, settings=None):
        super(ClassifierManager, self).__init__(api_key, settings=settings)

    def _classifier_path(self, classifier_id, *rest):
        _check_id(classifier_id, "Classifiers must have an ID.")
        return "".join([self.path, _quote_id(classifier_id)] + list(rest))

    def _category_path(self, classifier_id, category_id):
        _check_id(category_id, "Categories can only be accessed by ID.")
        return self._classifier_path(classifier_id, "/", _quote_id(category_id))

    def create_classifier(self, classifier_id, categories):
        """ Creates a new classifier from a list of dicts, each with a "categoryId", a "query" and an optional "label".
        Any existing classifier with this ID will be replaced. """
        classifier_path = self._classifier_path(classifier_id)

        categories = _check_non_empty_list(
            categories,
            "categories must be a List of dicts corresponding to properties of the new categories.",
            "List of new categories cannot be empty.")

        return self.do_request(classifier_path, json.dumps(categories), content_type=_JSON_CONTENT_TYPE, method="PUT")

    def create_classifier_with_csv(self, classifier_id, categories_csv):
        """ Uploads the string contents of a CSV file containing new categories to be added to the classifier called classifier_id.
           Any existing classifier with this ID will be replaced. """
        classifier_path = self._classifier_path(classifier_id)

        if not isinstance(categories_csv, str):
            raise ValidationError("categories_csv must be a String containing the contents of a csv file that defines a new classifier.")

        return self.do_request(classifier_path, categories_csv, content_type=_CSV_CONTENT_TYPE, method="PUT")

    def delete_classifier(self, classifier_id):
        """ Deletes a Classifier and all its Categories by id. """
        return self.do_request(self._classifier_path(classifier_id), method="DELETE")

    def all_categories(self, classifier_id, limit=None, offset=None):
        """ Returns the categories of classifier_id, along with paging information.

        >>> category_response = classifier_manager.all_categories("UNIQUE_CLASSIFIER_ID", limit=10, offset=10)
        >>> for category in category_response["response"]["categories"]:
        >>>     print(category["query"])
        """
        all_path = self._classifier_path(classifier_id, "/_all", _paging_suffix(limit, offset))
        return self.do_request(all_path, method="GET")

    def delete_category(self, classifier_id, category_id):
        return self.do_request(self._category_path(classifier_id, category_id), method="DELETE")

    def get_category(self, classifier_id, category_id):
        return self.do_request(self._category_path(classifier_id, category_id), method="GET")


class AccountManager(TextRazorConnection):

    path = "account/"

    def __init__(self, api_key=None, settings=None):
        super(AccountManager, self).__init__(api_key, settings=settings)

    def get_account(self):
        """ Retrieves the account settings and realtime usage statistics for your account.

        This call does not count towards your daily request or concurrency limits.

        >>> import textrazor
        >>> account_manager = textrazor.AccountManager("YOUR_API_KEY_HERE")
        >>>
        >>> print(account_manager.get_account()["response"]["requestsUsedToday"])
        """
        return self.do_request(self.path, method="GET")


class TextRazor(TextRazorConnection):
    """
    The main TextRazor client.  To process your text, create a :class:`TextRazor` instance with your API key
    and set the extractors you need to process the text.  Calls to :meth:`analyze` and :meth:`analyze_url` will then process raw text or URLs
    , returning the decoded TextRazor response on success.

    Calls are threadsafe once the request options are set.  You should create a new instance for each request
    if you are likely to be changing the request options in a multithreaded environment.

    >>> import textrazor
    >>>
    >>> client = textrazor.TextRazor("API_KEY_GOES_HERE", extractors=["entities"])
    >>> client.set_cleanup_mode("cleanHTML")
    >>>
    >>> response = client.analyze_url("http://www.bbc.co.uk/news/uk-politics-18640916")
    >>>
    >>> for entity in response["response"].get("entities", []):
    >>>     print(entity["entityId"], entity["relevanceScore"])
    """

    def __init__(self, api_key=None, extractors=None, do_compression=None, do_encryption=None, settings=None):
        super(TextRazor, self).__init__(api_key, do_compression, do_encryption, settings=settings)

        self.extractors = []
        self.cleanup_html = False
        self.cleanup_mode = None
        self.cleanup_return_cleaned = None
        self.cleanup_return_raw = None
        self.cleanup_use_metadata = None
        self.download_user_agent = None
        self.rules = None
        self.language_override = None
        self.enrichment_queries = []
        self.dbpedia_type_filters = []
        self.freebase_type_filters = []
        self.allow_overlap = None
        self.entity_dictionaries = []
        self.classifiers = []
        self.classifier_max_categories = None

        if extractors is not None:
            self.set_extractors(extractors)

    def set_extractors(self, extractors):
        """Sets a list of "Extractors" which extract various information from your text.
        Only select the extractors that are explicitly required by your application for optimal performance.
        Any extractor that doesn't match one of the predefined list below will be assumed to be a custom Prolog extractor.

        Valid options are: words, phrases, entities, dependency-trees, relations, entailments. """
        self.extractors = _check_string_list(extractors, "extractors")

    def add_extractor(self, extractor):
        self.extractors.append(_check_string(extractor, "extractor"))

    def set_rules(self, rules):
        """Sets a string containing Prolog logic.  All rules matching an extractor name listed in the request will be evaluated
        and all matching param combinations linked in the response. """
        self.rules = _check_string(rules, "rules")

    def set_enrichment_queries(self, enrichment_queries):
        """Set a list of "Enrichment Queries", used to enrich the entity response with structured linked data.
        The syntax for these queries is documented at https://www.textrazor.com/enrichment """
        self.enrichment_queries = _check_string_list(enrichment_queries, "enrichment_queries")

    def add_enrichment_query(self, enrichment_query):
        self.enrichment_queries.append(_check_string(enrichment_query, "enrichment_query"))

    def set_language_override(self, language_override):
        """When set to a ISO-639-2 language code, force TextRazor to analyze content with this language.
        If not set TextRazor will use the automatically identified language.
        """
        self.language_override = _check_string(language_override, "language_override")

    def set_cleanup_html(self, cleanup_html):
        """When True, input text is treated as raw HTML and will be cleaned of tags, comments, scripts,
        and boilerplate content removed.  See set_cleanup_mode for a more flexible cleanup option."""
        self.cleanup_html = _check_bool(cleanup_html, "cleanup_html")

    def set_do_cleanup_HTML(self, cleanup_html):
        warnings.warn("set_do_cleanup_HTML has been deprecated. Please see set_cleanup_mode for a more flexible cleanup option.", DeprecationWarning)

        self.set_cleanup_html(cleanup_html)

    def set_cleanup_mode(self, cleanup_mode):
        """Controls the preprocessing cleanup mode that TextRazor will apply to your content before analysis.
        For all options aside from "raw" any position offsets returned will apply to the final cleaned text,
        not the raw HTML. If the cleaned text is required please see the :meth:`set_cleanup_return_cleaned' option.

        Valid options are:
        raw       - Content is analyzed "as-is", with no preprocessing.
        cleanHTML - Boilerplate HTML is removed prior to analysis, including tags, comments, menus, leaving only the
                    body of the article.
        stripTags - All Tags are removed from the document prior to analysis. This will remove all HTML, XML tags, but
                    the content of headings, menus will remain. This is a good option for analysis of HTML pages that aren't
                    long form documents.

        Defaults to "raw" for analyze requests, and "cleanHTML" for analyze_url requests.
        """
        self.cleanup_mode = _check_string(cleanup_mode, "cleanup_mode")

    def set_cleanup_return_cleaned(self, return_cleaned):
        """When return_cleaned is True, the TextRazor response will contain the cleanedText property. To save bandwidth, only set this to
        True if you need it in your application. Defaults to False."""
        self.cleanup_return_cleaned = _check_bool(return_cleaned, "return_cleaned")

    def set_cleanup_return_raw(self, return_raw):
        """When return_raw is True, the TextRazor response will contain the rawText property, the original text TextRazor received or downloaded
        before cleaning. To save bandwidth, only set this to True if you need it in your application. Defaults to False."""
        self.cleanup_return_raw = _check_bool(return_raw, "return_raw")

    def set_cleanup_use_metadata(self, use_metadata):
        """When use_metadata is True, TextRazor will use metadata extracted from your document to help in the disambiguation/extraction
        process. This include HTML titles and metadata, and can significantly improve results for shorter documents without much other
        content.

        This option has no effect when cleanup_mode is 'raw'.
        """
        self.cleanup_use_metadata = _check_bool(use_metadata, "use_metadata")

    def set_download_user_agent(self, user_agent):
        """Sets the User-Agent header to be used when downloading URLs through analyze_url. This should be a descriptive string identifying
        your application, or an end user's browser user agent if you are performing live requests from a given user.

        Defaults to "TextRazor Downloader (https://www.textrazor.com)"
        """
        self.download_user_agent = _check_string(user_agent, "user_agent")

    def set_entity_dictionaries(self, entity_dictionaries):
        """Sets a list of the custom entity dictionaries to match against your content. Each item should be a string ID
        corresponding to dictionaries you have previously configured through the DictionaryManager interface."""
        self.entity_dictionaries = _check_string_list(entity_dictionaries, "entity_dictionaries")

    def add_entity_dictionary(self, dictionary_id):
        self.entity_dictionaries.append(_check_string(dictionary_id, "dictionary_id"))

    def set_entity_allow_overlap(self, allow_overlap):
        """When allow_overlap is True, entities in the response may overlap. When False, the "best" entity
        is found such that none overlap. Defaults to True. """
        self.allow_overlap = _check_bool(allow_overlap, "allow_overlap")

    def set_entity_dbpedia_type_filters(self, filters):
        """Set a list of DBPedia types to filter entity extraction on. All returned entities must
        match at least one of these types."""
        self.dbpedia_type_filters = _check_string_list(filters, "filters")

    def add_entity_dbpedia_type_filter(self, type_filter):
        self.dbpedia_type_filters.append(_check_string(type_filter, "type_filter"))

    def set_entity_freebase_type_filters(self, filters):
        """Set a list of Freebase types to filter entity extraction on. All returned entities must
        match at least one of these types."""
        self.freebase_type_filters = _check_string_list(filters, "filters")

    def add_entity_freebase_type_filter(self, type_filter):
        self.freebase_type_filters.append(_check_string(type_filter, "type_filter"))

    def set_classifiers(self, classifiers):
        """Sets a list of classifiers to evaluate against your document. Each entry should be a string ID corresponding to either one of TextRazor's default classifiers, or one you have previously configured through the ClassifierManager interface.

        Valid Options are:
        textrazor_iab Score against the Internet Advertising Bureau QAG segments - approximately 400 high level categories arranged into two tiers.
        textrazor_newscodes Score against the IPTC newscodes - approximately 1400 high level categories organized into a three level tree.
        custom classifier name Score against a custom classifier, previously created through the Classifier Manager interface."""
        self.classifiers = _check_string_list(classifiers, "classifiers")

    def add_classifier(self, classifier):
        self.classifiers.append(_check_string(classifier, "classifier"))

    def set_classifier_max_categories(self, max_categories):
        """Sets the maximum number of matching categories to retrieve from the TextRazor."""
        if isinstance(max_categories, bool) or not isinstance(max_categories, int):
            raise ValidationError("max_categories must be an int")

        self.classifier_max_categories = max_categories

    def build_request(self):
        """Returns a new :class:`TextRazorQueryBuilder` holding every option set on this client."""
        builder = TextRazorQueryBuilder()

        builder.add("extractors", self.extractors)
        builder.add("cleanupHTML", self.cleanup_html)
        builder.add("rules", self.rules)
        builder.add("languageOverride", self.language_override)

        builder.add("entities.allowOverlap", self.allow_overlap)
        builder.add("entities.filterDbpediaTypes", self.dbpedia_type_filters)
        builder.add("entities.filterFreebaseTypes", self.freebase_type_filters)
        builder.add("entities.enrichmentQueries", self.enrichment_queries)
        builder.add("entities.dictionaries", self.entity_dictionaries)

        builder.add("classifiers", self.classifiers)
        builder.add("classifier.maxCategories", self.classifier_max_categories)

        builder.add("cleanup.mode", self.cleanup_mode)
        builder.add("cleanup.returnCleaned", self.cleanup_return_cleaned)
        builder.add("cleanup.returnRaw", self.cleanup_return_raw)
        builder.add("cleanup.useMetadata", self.cleanup_use_metadata)

        builder.add("download.userAgent", self.download_user_agent)

        return builder

    def _analyze(self, key, value):
        builder = self.build_request()
        builder.add(key, value)

        return self.do_request("", builder.build(), content_type=_FORM_CONTENT_TYPE, method="POST")

    def analyze_url(self, url):
        """Calls the TextRazor API with the provided url.

        TextRazor will first download the contents of this URL, and then process the resulting text.

        TextRazor will only attempt to analyze text documents. Any invalid UTF-8 characters will be replaced with a space character and ignored.
        TextRazor limits the total download size to approximately 1M. Any larger documents will be truncated to that size, and a warning
        will be returned in the response.

        By default, TextRazor will clean all HTML prior to processing. For more control of the cleanup process,
        see the :meth:`set_cleanup_mode' option.

        Returns the decoded TextRazor response on success. """
        return self._analyze("url", _check_string(url, "url"))

    def analyze(self, text):
        """Calls the TextRazor API with the provided unicode text.

        Returns the decoded TextRazor response on success. """
        return self._analyze("text", _check_string(text, "text"))
