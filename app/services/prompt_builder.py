from core.config import NEGATIVE_PROMPT_TEMPLATE


def build_full_prompt(prompt: str, negative_prompt: str = "") -> str:
    """
    Folds the negative prompt into the prompt text, since the image model
    has no dedicated negative-prompt parameter.
    """
    if negative_prompt and negative_prompt.strip():
        return prompt + NEGATIVE_PROMPT_TEMPLATE.format(negative_prompt=negative_prompt)
    return prompt
