import httpx

from songwars.services.lookup import SEARCH_URL, SongLookupService


def _item(video_id, title, channel='Channel'):
    return {
        'id': {'videoId': video_id},
        'snippet': {
            'title': title,
            'description': '',
            'channelTitle': channel,
            'thumbnails': {'medium': {'url': f'https://img.example/{video_id}.jpg'}},
        },
    }


def _service(handler):
    return SongLookupService(api_key='k', timeout=1.0, transport=httpx.MockTransport(handler))


def test_no_api_key_returns_none():
    def handler(request):
        raise AssertionError('no request expected without a key')

    service = SongLookupService(api_key=None, transport=httpx.MockTransport(handler))
    assert service.lookup('Song', 'Artist') is None


def test_query_parameters():
    seen = {}

    def handler(request):
        seen['url'] = str(request.url)
        seen['params'] = dict(request.url.params)
        return httpx.Response(200, json={'items': [_item('v1', 'Song - Artist')]})

    match = _service(handler).lookup('Song', 'Artist')
    assert seen['url'].startswith(SEARCH_URL)
    assert seen['params']['q'] == 'Song Artist'
    assert seen['params']['videoCategoryId'] == '10'
    assert seen['params']['maxResults'] == '3'
    assert seen['params']['key'] == 'k'
    assert match.media_id == 'v1'
    assert match.thumbnail_url == 'https://img.example/v1.jpg'
    assert match.channel_title == 'Channel'


def test_skips_karaoke_and_reaction_videos():
    def handler(request):
        return httpx.Response(200, json={'items': [
            _item('k1', 'Song (Karaoke Version)'),
            _item('r1', 'REACTION to Song'),
            _item('ok', 'Song (Official Video)'),
        ]})

    assert _service(handler).lookup('Song', 'Artist').media_id == 'ok'


def test_falls_back_to_first_result_when_all_filtered():
    def handler(request):
        return httpx.Response(200, json={'items': [
            _item('i1', 'Song Instrumental'),
            _item('r2', 'Song review'),
        ]})

    assert _service(handler).lookup('Song', 'Artist').media_id == 'i1'


def test_empty_results():
    def handler(request):
        return httpx.Response(200, json={'items': []})

    assert _service(handler).lookup('Song', 'Artist') is None


def test_upstream_error_returns_none():
    def handler(request):
        return httpx.Response(403, json={'error': {'message': 'quota'}})

    assert _service(handler).lookup('Song', 'Artist') is None


def test_transport_failure_returns_none():
    def handler(request):
        raise httpx.ConnectError('boom', request=request)

    assert _service(handler).lookup('Song', 'Artist') is None


def test_malformed_body_returns_none():
    def handler(request):
        return httpx.Response(200, json={'items': [{'snippet': {'title': 'x'}}]})

    assert _service(handler).lookup('Song', 'Artist') is None
