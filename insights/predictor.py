# model + metadata loading for the insights service
# the explainer is built once per process and shared by every request

import logging
from pathlib import Path
from typing import Dict

import torch

from model.model import ScoringMLP
from insights.config import settings
from insights.explainer import LOCOExplainer
from insights.metadata import VectorMetadata

logger = logging.getLogger(__name__)

def load_model(model_path) -> ScoringMLP:
    """
    load a trained ScoringMLP checkpoint

    the checkpoint is a dict with 'model_state_dict' and the architecture
    keys 'input_dim', 'n_outputs', 'hidden_dims', 'regression'
    """
    model_path = Path(model_path)
    if not model_path.exists():
        raise FileNotFoundError(f"model not found at {model_path}")

    checkpoint = torch.load(model_path, map_location='cpu')

    model = ScoringMLP(
        input_dim=checkpoint['input_dim'],
        n_outputs=checkpoint.get('n_outputs', 1),
        hidden_dims=checkpoint.get('hidden_dims'),
        regression=checkpoint.get('regression', False)
    )
    model.load_state_dict(checkpoint['model_state_dict'])
    model.eval()  # set to evaluation mode (no dropout)

    logger.info("✅ loaded model from %s (%d inputs, %d outputs)",
                model_path, model.input_dim, model.n_outputs)
    return model

def load_explainer(model_path: str = None, metadata_path: str = None) -> LOCOExplainer:
    """
    build an explainer from the configured artifacts

    args:
        model_path: torch checkpoint (default settings.model_path)
        metadata_path: vector metadata json (default settings.metadata_path)
    """
    model = load_model(model_path or settings.model_path)
    metadata = VectorMetadata.load(metadata_path or settings.metadata_path)

    if metadata.size != model.input_dim:
        raise ValueError(
            f"metadata describes {metadata.size} positions "
            f"but the model expects {model.input_dim}"
        )

    return LOCOExplainer(model, metadata)

def get_model_info(explainer: LOCOExplainer) -> Dict:
    """get information about loaded explainer"""
    return {
        'metadata_name': explainer.metadata.name,
        'input_features': explainer.metadata.size,
        'text_features': len(explainer.metadata.text_indices),
        'top_k': explainer.top_k,
        'strategy': explainer.strategy.value
    }

# global explainer instance
# loaded once on first use
explainer = None

def get_explainer() -> LOCOExplainer:
    """
    get or create global explainer instance
    ensures model is loaded only once
    """
    global explainer
    if explainer is None:
        explainer = load_explainer()
    return explainer
