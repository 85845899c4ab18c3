import numpy as np
import voyageai

from cortex.errors import ProviderError


class VoyageEmbedder:
    def __init__(self, api_key: str, model: str = "voyage-3"):
        self.client = voyageai.Client(api_key=api_key)
        self.model = model

    def embed(self, text: str) -> np.ndarray:
        try:
            result = self.client.embed(texts=[text], model=self.model, input_type="document")
        except Exception as e:
            raise ProviderError(f"Voyage embedding request failed: {e}") from e

        if not result.embeddings or not result.embeddings[0]:
            raise ProviderError("Voyage returned an empty embedding")
        return np.array(result.embeddings[0], dtype=np.float32)
