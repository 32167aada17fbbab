import datetime
import kopf


@kopf.on.probe(id='now')
def get_current_timestamp(**kwargs):
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


@kopf.on.probe(id='ocmClientConfigured')
def ocm_client_configured(memo: kopf.Memo, **kwargs):
    holder = getattr(memo, "ocm_client_holder", None)
    return holder is not None and holder.configured
