"""Prompt text for the two narrative reports.

The label strings in these templates ("Preço Atual:", "FATORES POSITIVOS:",
...) are what ``pipeline.extractor`` anchors on. Change both together.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, List

from crypto_narrator.models.datatypes import SentimentSample, TickerSnapshot
from crypto_narrator.pipeline.normalizer import snapshot_to_payload

REALTIME_SYSTEM_TEMPLATE = """Você é um agente especializado em reportar dados do {asset_name}.

FORMATE OS DADOS EXATAMENTE ASSIM:

**{asset_name} ({symbol})**
- Preço Atual: $[lastPrice]
- Variação 24h: [priceChangePercent]%
- Volume: [volume] {base} / $[quoteVolume] {quote}
- Alta: $[highPrice]
- Baixa: $[lowPrice]

REGRAS IMPORTANTES:
- Use os números EXATAMENTE como fornecidos
- NÃO adicione ou remova casas decimais
- NÃO adicione vírgulas
- NÃO faça nenhuma modificação nos números

Os valores já virão formatados com 2 casas decimais."""

REALTIME_USER_TEMPLATE = """Dados atuais do {asset_name} ({symbol}) retornados pela API Binance:

{ticker_json}

Apresente esses dados no formato indicado."""

PREDICTION_SYSTEM_TEMPLATE = """Você é um analista de previsão do {asset_name}.
Use os dados disponíveis para avaliar se o {asset_name} atingirá determinados preços.

ANÁLISE OBRIGATÓRIA:
1. Dados históricos (fornecidos abaixo)
2. Índice Fear & Greed (fornecido abaixo)
3. Dados atuais (já fornecidos)

FORMATO DA RESPOSTA:

ANÁLISE PREDITIVA {asset_name_upper}
-------------------------
Alvo: [Faixa de preço e data]
Confiança: [Baixa/Média/Alta]

FATORES POSITIVOS:
1. [fator concreto baseado em dados]
2. [fator concreto baseado em dados]
3. [fator concreto baseado em dados]

FATORES DE RISCO:
1. [risco baseado em dados]
2. [risco baseado em dados]
3. [risco baseado em dados]

INDICADORES TÉCNICOS:
- Fear & Greed: [valor atual] ([classificação])
- Tendência: [tendência baseada nos dados históricos]
- Momentum: [análise do momentum atual]

CONCLUSÃO:
[Análise objetiva baseada apenas nos dados apresentados]"""

PREDICTION_USER_TEMPLATE = """Considerando os dados atuais acima, analise se o {asset_name} atingirá {target_price} em {target_date}.
Use os dados históricos e o índice Fear & Greed para fundamentar sua análise.

ÍNDICE FEAR & GREED (mais recente primeiro):
{sentiment_lines}

HISTÓRICO ({periods} dias, {history_quote}):
{history_lines}"""


def realtime_prompts(normalized: TickerSnapshot, asset_name: str, base: str, quote: str) -> tuple:
    """Return ``(system, user)`` for the real-time report."""
    system = REALTIME_SYSTEM_TEMPLATE.format(
        asset_name=asset_name, symbol=normalized.symbol, base=base, quote=quote,
    )
    user = REALTIME_USER_TEMPLATE.format(
        asset_name=asset_name,
        symbol=normalized.symbol,
        ticker_json=json.dumps(snapshot_to_payload(normalized), indent=2),
    )
    return system, user


def _format_sentiment(samples: List[SentimentSample]) -> str:
    if not samples:
        return "- sem dados"
    lines = []
    for sample in samples:
        day = datetime.fromtimestamp(sample.timestamp, tz=timezone.utc).strftime("%Y-%m-%d")
        lines.append(f"- {day}: {sample.value} ({sample.classification})")
    return "\n".join(lines)


def _format_history(summary: Dict[str, Any]) -> str:
    if not summary.get("periods"):
        return "- sem dados"
    return "\n".join([
        f"- Fechamento inicial: {summary['first_close']}",
        f"- Fechamento final: {summary['last_close']}",
        f"- Variação no período: {summary['change_pct']}%",
        f"- Variação 7 dias: {summary['change_7d_pct']}%",
        f"- Máxima / Mínima de fechamento: {summary['max_close']} / {summary['min_close']}",
        f"- Volume médio: {summary['avg_volume_from']} / {summary['avg_volume_to']}",
        f"- Tendência calculada: {summary['trend']}",
    ])


def prediction_prompts(
    asset_name: str,
    target_price: str,
    target_date: str,
    samples: List[SentimentSample],
    history_summary: Dict[str, Any],
    history_quote: str = "USD",
) -> tuple:
    """Return ``(system, user)`` for the predictive report."""
    system = PREDICTION_SYSTEM_TEMPLATE.format(
        asset_name=asset_name, asset_name_upper=asset_name.upper(),
    )
    user = PREDICTION_USER_TEMPLATE.format(
        asset_name=asset_name,
        target_price=target_price,
        target_date=target_date,
        sentiment_lines=_format_sentiment(samples),
        periods=history_summary.get("periods", 0),
        history_quote=history_quote,
        history_lines=_format_history(history_summary),
    )
    return system, user
