"""
seo/clusters.py

Frequency-weighted topic clusters over a keyword profile.
"""

from __future__ import annotations

from seo.types import KeywordCount, TopicCluster

TOPIC_MAP: dict[str, tuple[str, ...]] = {
    "CLOUD": ("cloud", "migration", "aws", "azure", "gcp", "kubernetes"),
    "TRANSFORMATION": ("digital transformation", "modernization", "innovation", "change management"),
    "FINTECH": ("banking", "payments", "fintech", "financial services"),
    "SAAS": ("platform", "software", "saas", "subscription"),
    "DATA_ANALYTICS": ("analytics", "bi", "data warehouse", "reporting"),
    "SECURITY": ("security", "compliance", "risk", "identity"),
}
MAX_CLUSTERS = 5


def build_topic_clusters(keywords: list[KeywordCount]) -> list[TopicCluster]:
    clusters: list[TopicCluster] = []
    for name, terms in TOPIC_MAP.items():
        # A keyword matching several terms of one cluster counts once per term.
        weight = sum(kw.frequency for term in terms for kw in keywords if term in kw.keyword)
        if weight > 0:
            clusters.append(TopicCluster(cluster_name=name, cluster_weight=weight))
    clusters.sort(key=lambda cluster: cluster.cluster_weight, reverse=True)
    return clusters[:MAX_CLUSTERS]
