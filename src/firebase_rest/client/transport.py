"""httpx client construction shared by the REST and streaming clients."""

import httpx

from firebase_rest.client.models import ClientConfig

AUTH_PARAM = "auth"
USER_AGENT = "firebase-rest-python"


def build_http_client(
    root_url: str,
    token: str | None,
    config: ClientConfig | None = None,
    streaming: bool = False,
) -> httpx.Client:
    """
    Create an httpx client rooted at root_url with the auth parameter attached.

    Args:
        root_url: Database URL, e.g. https://<name>.firebaseio.com
        token: Auth token sent as ?auth=<token> (omitted when None)
        config: Transport settings (defaults to ClientConfig())
        streaming: Disable the read timeout and follow redirects, since the
            stream endpoint redirects to the server owning the data

    Returns:
        Configured httpx.Client (caller owns and must close it)
    """
    config = config or ClientConfig()
    params = {AUTH_PARAM: token} if token is not None else {}
    headers = {"User-Agent": USER_AGENT, **config.headers}

    if streaming:
        timeout = httpx.Timeout(config.timeout, read=None)
    else:
        timeout = httpx.Timeout(config.timeout)

    return httpx.Client(
        base_url=root_url,
        params=params,
        headers=headers,
        timeout=timeout,
        verify=config.verify,
        follow_redirects=streaming,
    )
