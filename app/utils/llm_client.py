import logging
import openai
from typing import List, Dict, Optional
import asyncio
import time
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from app.config.settings import Settings

logger = logging.getLogger(__name__)

EMPTY_ANSWER_EXPLANATION = "Пустой ответ."

EXPLAIN_PROMPT_TEMPLATE = (
    'Ты - репетитор по английскому. Объясни КРАТКО ошибку (1-2 предложения). '
    'Русский: "{prompt_ru}", Правильно: "{correct_en}", Ответ ученика: "{user_answer_en}". '
    'Не здоровайся.'
)


class LLMError(Exception):
    """大模型调用错误基类"""


class LLMConfigError(LLMError):
    """缺少大模型配置（例如API token）"""


class LLMConnectionError(LLMError):
    """无法连接大模型服务"""


class LLMTimeoutError(LLMError):
    """大模型调用超时"""


class LLMStatusError(LLMError):
    """大模型服务返回非成功状态码"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class LLMResponseParseError(LLMError):
    """大模型响应无法解析或为空"""


def _is_connection_error(exc: BaseException) -> bool:
    # 超时也是APIConnectionError的子类，但不重试
    return isinstance(exc, openai.APIConnectionError) and not isinstance(exc, openai.APITimeoutError)


def _extract_content(response) -> str:
    """
    取出第一个choice的文本内容

    非JSON响应体在openai客户端中会以str返回，缺少choices、内容为空或只有空白都视为解析失败
    """
    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, KeyError, TypeError) as e:
        logger.error(f"LLM响应结构异常: {type(response).__name__}")
        raise LLMResponseParseError("AI parse error") from e

    if not isinstance(content, str) or not content.strip():
        logger.error("LLM响应中没有内容")
        raise LLMResponseParseError("AI parse error")
    return content


class LLMClient:
    """大模型客户端，通过兼容OpenAI的接口调用Hugging Face router"""

    def __init__(self, config: Settings):
        if not config.HUGGINGFACE_TOKEN:
            raise LLMConfigError("HUGGINGFACE_TOKEN未配置")

        self.model = config.LLM_MODEL
        self.base_url = config.LLM_API_BASE
        self.max_tokens = config.LLM_MAX_TOKENS
        self.timeout = config.LLM_TIMEOUT

        self.client = openai.OpenAI(
            api_key=config.HUGGINGFACE_TOKEN,
            base_url=self.base_url,
            timeout=self.timeout,
            max_retries=0,
        )

        logger.info(f"LLM客户端初始化完成，模型: {self.model}")

    @retry(
        retry=retry_if_exception(_is_connection_error),
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=1, min=1, max=4),
        reraise=True,
    )
    def _create_completion(self, messages: List[Dict[str, str]], temperature: float, max_tokens: int):
        return self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            stream=False  # 非流式响应
        )

    async def generate_response(self, messages: List[Dict[str, str]],
                                temperature: float = 0.3,
                                max_tokens: Optional[int] = None) -> str:
        """
        调用大模型生成响应

        Args:
            messages: 消息列表，格式为 [{"role": "user", "content": "..."}]
            temperature: 生成温度
            max_tokens: 最大token数

        Returns:
            str: 模型生成的响应内容

        Raises:
            LLMTimeoutError, LLMConnectionError, LLMStatusError, LLMResponseParseError
        """
        logger.debug(f"调用LLM，消息数: {len(messages)}, 温度: {temperature}, 最大token数: {max_tokens or self.max_tokens}")

        start_time = time.time()
        loop = asyncio.get_running_loop()
        try:
            response = await loop.run_in_executor(
                None,
                lambda: self._create_completion(messages, temperature, max_tokens or self.max_tokens)
            )
        except openai.APITimeoutError as e:
            logger.error(f"LLM调用超时: {e}")
            raise LLMTimeoutError("AI request timed out") from e
        except openai.APIConnectionError as e:
            logger.error(f"LLM连接失败: {e}")
            raise LLMConnectionError("AI connect error") from e
        except openai.APIStatusError as e:
            logger.error(f"LLM返回错误状态码 {e.status_code}: {e}")
            raise LLMStatusError("AI service error", status_code=e.status_code) from e
        except openai.APIResponseValidationError as e:
            logger.error(f"LLM响应格式错误: {e}")
            raise LLMResponseParseError("AI parse error") from e

        content = _extract_content(response)
        usage = getattr(response, "usage", None)
        elapsed_time = time.time() - start_time
        logger.debug(f"LLM调用成功: {len(content)}字符, "
                     f"耗时: {elapsed_time:.2f}s, "
                     f"Token使用: {usage.total_tokens if usage else 'N/A'}")
        return content

    async def explain_mistake(self, prompt_ru: str, correct_en: str, user_answer_en: str) -> str:
        """
        让大模型简短解释用户的翻译错误

        空答案直接返回固定说明，不调用大模型。
        """
        if not user_answer_en or not user_answer_en.strip():
            return EMPTY_ANSWER_EXPLANATION

        prompt = EXPLAIN_PROMPT_TEMPLATE.format(
            prompt_ru=prompt_ru,
            correct_en=correct_en,
            user_answer_en=user_answer_en,
        )
        content = await self.generate_response([{"role": "user", "content": prompt}])
        explanation = content.strip()
        if not explanation:
            logger.error("LLM解释内容为空")
            raise LLMResponseParseError("AI parse error")
        return explanation


class MockLLMClient(LLMClient):
    """模拟LLM客户端，用于测试和开发"""

    def __init__(self, config: Optional[Settings] = None, response: str = "Обрати внимание на порядок слов."):
        self.model = "mock"
        self.response = response
        self.calls: List[List[Dict[str, str]]] = []
        logger.info("使用模拟LLM客户端")

    async def generate_response(self, messages: List[Dict[str, str]],
                                temperature: float = 0.3,
                                max_tokens: Optional[int] = None) -> str:
        """模拟生成响应"""
        self.calls.append(messages)
        return self.response


def create_llm_client(config: Settings) -> LLMClient:
    """创建LLM客户端实例"""
    if config.LLM_USE_MOCK:
        logger.info("使用模拟LLM客户端（开发模式）")
        return MockLLMClient(config)
    return LLMClient(config)
