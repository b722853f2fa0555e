from sqlalchemy import Column, String, Numeric
from app.database import Base

class SaCli(Base):
    """Клиент ERP (таблица sacli)"""
    __tablename__ = "sacli"

    CodClie = Column(String(15), primary_key=True)
    Descrip = Column(String(60), nullable=False, index=True)
    ID3 = Column(String(15), nullable=True)            # налоговый номер
    Direc1 = Column(String(60), nullable=True)
    LimiteCred = Column(Numeric(28, 4), nullable=True)

    def __repr__(self):
        return f"<SaCli {self.CodClie} ({self.Descrip})>"
