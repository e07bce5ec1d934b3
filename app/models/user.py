from sqlalchemy import Column, String, Integer
from .base import BaseModel

"""
用户模型
记录用户账号信息(邮箱、密码哈希)以及全局答题统计: 总答题次数、总答对次数。
统计字段只由答题写入流程递增。
"""
class User(BaseModel):
    __tablename__ = "users"

    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    total_attempts = Column(Integer, nullable=False, default=0)
    total_correct = Column(Integer, nullable=False, default=0)
