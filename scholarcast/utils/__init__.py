from scholarcast.utils.normalize import repair_llm_json
from scholarcast.utils.numbers import round_half_up

__all__ = ["repair_llm_json", "round_half_up"]
