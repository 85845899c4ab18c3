import numpy as np
from openai import OpenAI

from cortex.errors import ProviderError


class OpenAIEmbedder:
    def __init__(self, api_key: str, model: str = "text-embedding-3-small"):
        self.openai_client = OpenAI(api_key=api_key)
        self.model = model

    def embed(self, text: str) -> np.ndarray:
        try:
            response = self.openai_client.embeddings.create(input=text, model=self.model)
        except Exception as e:
            raise ProviderError(f"OpenAI embedding request failed: {e}") from e

        if not response.data or not response.data[0].embedding:
            raise ProviderError("OpenAI returned an empty embedding")
        return np.array(response.data[0].embedding, dtype=np.float32)
