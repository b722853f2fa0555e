from sqlalchemy import Column, String, Numeric
from app.database import Base

class SaProd(Base):
    """Товар в справочнике ERP (таблица saprod)"""
    __tablename__ = "saprod"

    CodProd = Column(String(15), primary_key=True)     # код товара, он же id
    Descrip = Column(String(40), nullable=False, index=True)
    Precio1 = Column(Numeric(28, 4), default=0)        # основная цена
    Existen = Column(Numeric(28, 3), default=0)        # остаток
    CodInst = Column(String(10), nullable=True)        # категория (инстанция)

    def __repr__(self):
        return f"<SaProd {self.CodProd} ({self.Descrip})>"
