from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey
from app.database import Base

class SaFact(Base):
    """Заголовок заказа (таблица safact)"""
    __tablename__ = "safact"

    NumeroD = Column(String(20), primary_key=True)     # PED-NNNNN
    CodClie = Column(String(15), nullable=False, index=True)
    Descrip = Column(String(60), nullable=True)        # имя клиента на момент заказа
    FechaE = Column(DateTime(timezone=True), nullable=False)
    MtoTotal = Column(Numeric(28, 4), nullable=False)
    Status = Column(String(20), nullable=False, default="Processed")

    def __repr__(self):
        return f"<SaFact {self.NumeroD} ({self.CodClie})>"

class SaItemFac(Base):
    """Строка заказа (таблица saitemfac)"""
    __tablename__ = "saitemfac"

    NumeroD = Column(String(20), ForeignKey("safact.NumeroD"), primary_key=True)
    NroLinea = Column(Integer, primary_key=True)
    CodItem = Column(String(15), nullable=False)
    Descrip1 = Column(String(40), nullable=True)
    Cantidad = Column(Numeric(28, 3), nullable=False)
    Precio = Column(Numeric(28, 4), nullable=False)
    TotalItem = Column(Numeric(28, 4), nullable=False)

    def __repr__(self):
        return f"<SaItemFac {self.NumeroD}#{self.NroLinea}>"
