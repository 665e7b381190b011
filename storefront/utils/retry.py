# storefront/utils/retry.py
import stripe
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type


def stripe_retry():
    # only transport failures; API errors are final answers from the processor
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=3),
        retry=retry_if_exception_type(stripe.APIConnectionError),
    )
